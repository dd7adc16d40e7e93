"""
RefData Wire Codecs

Surface syntax for the two wire formats identifiers are exchanged in:

- Format A (JSON): the null literal is ``null``; a present identifier is a
  double-quoted canonical ID.
- Format B (XML): absence is an element with empty text; a present
  identifier is the canonical ID as element text.

The identifier classes own the semantic rules (validity, resolution, error
collection). This module only knows how to produce and take apart the
bytes.
"""
from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any, Optional, Union

from .exceptions import DecodeMalformedError


NULL_LITERAL = "null"
DEFAULT_XML_TAG = "Value"

RawInput = Union[str, bytes, bytearray]


# =============================================================================
# Format A (JSON)
# =============================================================================

def raw_text(data: Optional[Any]) -> str:
    """
    Return raw wire input as text without interpreting it.

    ``None`` is empty input. Values that are neither text nor bytes are
    rendered as JSON text.
    """
    if data is None:
        return ""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="replace")
    if isinstance(data, str):
        return data
    return json_text_of(data)


def strip_quotes(raw: str) -> str:
    """
    Remove every double-quote character from raw input.

    This is a literal substitution, not a JSON unescape: escape sequences
    such as ``\\u0041`` survive as text.
    """
    return raw.replace('"', "")


def encode_json_string(value: Optional[str]) -> str:
    """Encode an ID as a JSON string, or ``null`` when absent or empty."""
    if not value:
        return NULL_LITERAL
    return '"' + value + '"'


def decode_json_string(data: RawInput, enumeration: Optional[str] = None) -> str:
    """
    Decode a JSON string literal into its text.

    ``null`` decodes to the empty string.

    Raises:
        DecodeMalformedError: If the input is not valid JSON or not a string
    """
    text = raw_text(data)
    try:
        value = json.loads(text)
    except ValueError as e:
        raise DecodeMalformedError(
            message=f"malformed JSON identifier: {e}",
            details={"input": text},
            enumeration=enumeration,
        )

    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeMalformedError(
            message=f"expected a JSON string, got {type(value).__name__}",
            details={"input": text},
            enumeration=enumeration,
        )
    return value


def json_text_of(value: Any) -> str:
    """Render an already-decoded value back into JSON text for capture."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


# =============================================================================
# Format B (XML)
# =============================================================================

def to_element(text: str, tag: str = DEFAULT_XML_TAG) -> ET.Element:
    """Build an element carrying ``text`` as its content."""
    element = ET.Element(tag)
    element.text = text
    return element


def element_to_string(element: ET.Element) -> str:
    """Serialize an element; empty content is written as ``<Tag></Tag>``."""
    return ET.tostring(element, encoding="unicode", short_empty_elements=False)


def element_text(
    source: Union[ET.Element, RawInput],
    enumeration: Optional[str] = None,
) -> str:
    """
    Return the text content of an element.

    ``source`` may be an element or serialized XML.

    Raises:
        DecodeMalformedError: If serialized XML cannot be parsed
    """
    if isinstance(source, ET.Element):
        element = source
    else:
        try:
            element = ET.fromstring(source)
        except ET.ParseError as e:
            raise DecodeMalformedError(
                message=f"malformed XML identifier: {e}",
                details={"input": raw_text(source)},
                enumeration=enumeration,
            )
    return element.text or ""
