"""
RefData Identifiers

Two wire-safe representations of an enumeration member:

- ``EnumID`` is the strict identifier. It is a ``str`` holding the ID and
  fails loudly when asked to encode or decode something its table does not
  recognize.
- ``ValidatedEnumID`` wraps at most one resolved ``EnumID`` together with
  the raw value captured from the wire and the errors seen while decoding.
  Decoding into it never raises, so one bad field cannot abort the parse of
  the surrounding document.

Every ``EnumerationTable`` creates its own subclass of each (``table.ID``
and ``table.ValidatedID``); the classes here hold all of the behavior.

Absent identifiers are ``None``. Table lookups accept ``None`` and return
``None``.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

from pydantic_core import core_schema

from .. import codec
from ..exceptions import (
    DecodeInvalidError,
    DecodeMalformedError,
    EncodeInvalidError,
    UnsupportedLookupError,
)

if TYPE_CHECKING:
    from .member import Member
    from .table import EnumerationTable

logger = logging.getLogger(__name__)


# =============================================================================
# Strict Identifier
# =============================================================================

class EnumID(str):
    """
    Strict identifier for a member of one enumeration.

    An ``EnumID`` may hold any string; ``valid()`` tells whether its table
    recognizes it. Instances produced by decoding or by the table itself
    always carry the canonical spelling.
    """

    __slots__ = ()

    table: ClassVar["EnumerationTable"]

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def clone(self) -> "EnumID":
        """Return an independent copy of this identifier."""
        return type(self)(str(self))

    def equals(self, other: Optional[Union["EnumID", str]]) -> bool:
        """True if ``other`` is present and holds exactly the same ID."""
        if other is None:
            return False
        return str(self) == str(other)

    def member(self) -> Optional["Member"]:
        """The member this identifier resolves to, if any."""
        return self.table.by_id_string(str(self))

    def valid(self) -> bool:
        """True if and only if the ID is non-empty and resolves."""
        if not self:
            return False
        return self.member() is not None

    def id(self) -> Optional["EnumID"]:
        """Return a copy of this identifier if it is valid, else ``None``."""
        if self.valid():
            return self.clone()
        return None

    def to_id_string(self) -> str:
        """The ID as a plain string if valid, else the empty string."""
        if self.valid():
            return str(self)
        return ""

    def validated_id(self) -> "ValidatedEnumID":
        """Wrap this identifier in the table's validated identifier type."""
        return self.table.ValidatedID(self.id())

    def parent(self) -> Optional["EnumID"]:
        """
        The parent member's ID, or this member's own ID if it has no parent.

        Returns ``None`` if the identifier does not resolve.

        Raises:
            UnsupportedLookupError: If the enumeration has no hierarchy
        """
        if not self.table.has_parents:
            raise UnsupportedLookupError(
                message="enumeration does not declare parent members",
                enumeration=self.table.name,
            )
        this = self.member()
        if this is None:
            return None
        return this.parent_or_self().id.clone()

    # -------------------------------------------------------------------------
    # Format A (JSON)
    # -------------------------------------------------------------------------

    def _canonical_for_encode(self) -> Optional[str]:
        if not self:
            return None
        this = self.member()
        if this is None:
            raise EncodeInvalidError(
                details={"value": str(self)},
                enumeration=self.table.name,
            )
        return str(this.id)

    def to_json(self) -> str:
        """
        Encode as JSON: ``null`` when empty, otherwise the quoted canonical ID.

        Raises:
            EncodeInvalidError: If the ID is non-empty and does not resolve
        """
        return codec.encode_json_string(self._canonical_for_encode())

    @classmethod
    def decode(cls, text: Optional[str]) -> Optional["EnumID"]:
        """
        Resolve already-unescaped text to its canonical identifier.

        Empty text decodes to ``None``.

        Raises:
            DecodeInvalidError: If the text is non-empty and does not resolve
        """
        if not text:
            return None
        this = cls.table.by_id_string(text)
        if this is None:
            raise DecodeInvalidError(
                details={"value": text},
                enumeration=cls.table.name,
            )
        return this.id.clone()

    @classmethod
    def from_json(cls, data: codec.RawInput) -> Optional["EnumID"]:
        """
        Decode a JSON string literal.

        Raises:
            DecodeMalformedError: If the input is not a JSON string
            DecodeInvalidError: If the string does not resolve
        """
        return cls.decode(codec.decode_json_string(data, cls.table.name))

    # -------------------------------------------------------------------------
    # Format B (XML)
    # -------------------------------------------------------------------------

    def to_xml(self, tag: str = codec.DEFAULT_XML_TAG) -> ET.Element:
        """
        Encode as an element whose text is the canonical ID (empty if absent).

        Raises:
            EncodeInvalidError: If the ID is non-empty and does not resolve
        """
        return codec.to_element(self._canonical_for_encode() or "", tag)

    def to_xml_string(self, tag: str = codec.DEFAULT_XML_TAG) -> str:
        return codec.element_to_string(self.to_xml(tag))

    @classmethod
    def from_xml(cls, source: Union[ET.Element, codec.RawInput]) -> Optional["EnumID"]:
        """
        Decode the text of an element.

        Raises:
            DecodeMalformedError: If serialized XML cannot be parsed
            DecodeInvalidError: If the text does not resolve
        """
        return cls.decode(codec.element_text(source, cls.table.name))

    # -------------------------------------------------------------------------
    # pydantic integration
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )

    @classmethod
    def _validate(cls, value: Any) -> Optional["EnumID"]:
        if not isinstance(value, str):
            raise DecodeMalformedError(
                message=f"expected a string identifier, got {type(value).__name__}",
                details={"value": repr(value)},
                enumeration=cls.table.name,
            )
        return cls.decode(str(value))

    @staticmethod
    def _serialize(value: "EnumID") -> Optional[str]:
        return value._canonical_for_encode()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


# =============================================================================
# Validated Identifier
# =============================================================================

class ValidatedEnumID:
    """
    Tolerant identifier for untrusted input.

    Holds at most one resolved ``EnumID`` plus the raw value captured while
    decoding and any errors recorded along the way. Decoding never raises.

    A single instance must not be decoded into from several threads at once;
    decoding mutates the captured value and the error list.

    Attributes:
        errors: Decode errors collected by this instance
    """

    __slots__ = ("_id", "_captured_value", "errors")

    table: ClassVar["EnumerationTable"]
    id_type: ClassVar[type[EnumID]]

    def __init__(self, id: Optional[str] = None) -> None:
        self._id: Optional[EnumID] = None
        self._captured_value: Optional[str] = None
        self.errors: list[Exception] = []
        if id:
            this = self.table.by_id_string(str(id))
            if this is not None:
                self._id = this.id.clone()

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def captured_value(self) -> Optional[str]:
        """The raw string seen by the last decode, if any."""
        return self._captured_value

    def clone(self) -> "ValidatedEnumID":
        """Copy the resolved ID; captured value and errors are not copied."""
        rtn = type(self)()
        if self._id is not None:
            rtn._id = self._id.clone()
        return rtn

    def equals(self, other: Optional["ValidatedEnumID"]) -> bool:
        """True if both resolve to the same ID, or neither resolves."""
        if other is None:
            return False
        if self._id is None and other._id is None:
            return True
        if self._id is None or other._id is None:
            return False
        return self._id.equals(other._id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValidatedEnumID):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def member(self) -> Optional["Member"]:
        if self._id is None:
            return None
        return self._id.member()

    def valid(self) -> bool:
        return self._id is not None and self._id.valid()

    def id(self) -> Optional[EnumID]:
        if self._id is None:
            return None
        return self._id.id()

    def to_id_string(self) -> str:
        if self._id is None:
            return ""
        return str(self._id)

    def validated_id(self) -> "ValidatedEnumID":
        return self.clone()

    def parent(self) -> Optional["ValidatedEnumID"]:
        """
        Validated form of ``EnumID.parent()``.

        Raises:
            UnsupportedLookupError: If the enumeration has no hierarchy
        """
        if not self.table.has_parents:
            raise UnsupportedLookupError(
                message="enumeration does not declare parent members",
                enumeration=self.table.name,
            )
        if self._id is None:
            return None
        pid = self._id.parent()
        if pid is None:
            return None
        return pid.validated_id()

    # -------------------------------------------------------------------------
    # Decoding (never raises)
    # -------------------------------------------------------------------------

    def decode_json(self, data: Optional[codec.RawInput]) -> None:
        """
        Decode raw JSON bytes into this identifier.

        Quote characters are stripped literally; the remainder is captured
        and then resolved. Unresolvable input is recorded in ``errors``.
        ``None`` decodes like empty input.
        """
        self._decode_value(codec.raw_text(data))

    def decode_text(self, text: Optional[str]) -> None:
        """Decode element text (or any other raw string) into this identifier."""
        self._decode_value(codec.raw_text(text))

    def _decode_value(self, raw: str) -> None:
        captured = codec.strip_quotes(raw)
        self._captured_value = captured
        self._id = None

        # empty string is invalid, but not an error
        if captured == "":
            return

        this = self.table.by_id_string(captured)
        if this is None:
            error = DecodeInvalidError(
                details={"value": captured},
                enumeration=self.table.name,
            )
            logger.debug(
                f"{self.table.name}: captured unrecognized value {captured!r}",
                extra={"enumeration": self.table.name, "error_code": error.code},
            )
            self.errors.append(error)
            return

        self._id = this.id.clone()

    @classmethod
    def from_json(cls, data: codec.RawInput) -> "ValidatedEnumID":
        """Decode raw JSON into a fresh instance. Never raises."""
        rtn = cls()
        rtn.decode_json(data)
        return rtn

    @classmethod
    def from_xml(cls, source: Union[ET.Element, codec.RawInput]) -> "ValidatedEnumID":
        """
        Decode element text into a fresh instance.

        Raises:
            DecodeMalformedError: If serialized XML cannot be parsed
        """
        rtn = cls()
        rtn.decode_text(codec.element_text(source, cls.table.name))
        return rtn

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        if self._id is None:
            return codec.NULL_LITERAL
        return self._id.to_json()

    def to_xml(self, tag: str = codec.DEFAULT_XML_TAG) -> ET.Element:
        return codec.to_element(self.to_id_string(), tag)

    def to_xml_string(self, tag: str = codec.DEFAULT_XML_TAG) -> str:
        return codec.element_to_string(self.to_xml(tag))

    # -------------------------------------------------------------------------
    # pydantic integration
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )

    @classmethod
    def _validate(cls, value: Any) -> "ValidatedEnumID":
        if isinstance(value, cls):
            return value
        rtn = cls()
        if value is None:
            return rtn
        if isinstance(value, (bytes, bytearray)):
            rtn.decode_json(value)
        else:
            rtn.decode_text(codec.json_text_of(value))
        return rtn

    @staticmethod
    def _serialize(value: "ValidatedEnumID") -> Optional[str]:
        return value.to_id_string() or None

    def __str__(self) -> str:
        return self.to_id_string()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.to_id_string()!r}, "
            f"captured={self._captured_value!r}, errors={len(self.errors)})"
        )
