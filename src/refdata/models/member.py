"""
RefData Member Records

A member is one row of an enumeration: its canonical ID, description,
programmatic name, sort order and metadata.

Typed metadata accessors are not stored separately. They are read from
the metadata map on demand, so the two representations cannot disagree.
Declared reference fields resolve to members of other enumerations; those
links are fixed when the catalog is loaded.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from .identifiers import EnumID

if TYPE_CHECKING:
    from .table import EnumerationTable


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def attribute_name(field_name: str) -> str:
    """Snake-case form of a metadata field name (``DisplayName`` -> ``display_name``)."""
    return _CAMEL_BOUNDARY.sub("_", field_name).lower()


@dataclass(eq=False)
class Member:
    """
    One entry of an enumeration.

    Members compare by identity: each exists once per process.

    Attributes:
        id: Canonical identifier (an instance of the table's ID type)
        description: Human-readable phrase, may be empty
        name: Programmatic label, also the accessor name on the table
        sort_order: Intended display order (not the position in the table)
        meta: Free-form metadata; read-only
        parent: Parent member in the same enumeration, if any
        table: Enumeration that owns this member
        references: Members of other enumerations, keyed by field name
    """
    id: EnumID
    description: str = ""
    name: str = ""
    sort_order: int = 0
    meta: Mapping[str, str] = field(default_factory=dict)
    parent: Optional["Member"] = field(default=None, repr=False)
    table: Optional["EnumerationTable"] = field(default=None, repr=False)
    references: Mapping[str, "Member"] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.meta, MappingProxyType):
            self.meta = MappingProxyType(dict(self.meta))
        if not isinstance(self.references, MappingProxyType):
            self.references = MappingProxyType(dict(self.references))

    # -------------------------------------------------------------------------
    # Typed metadata
    # -------------------------------------------------------------------------

    def typed_field(self, key: str) -> Union[str, "Member", None]:
        """
        Typed value of a declared metadata field.

        Reference fields return the referenced member; other fields return
        the metadata string (empty if the member does not set it).

        Raises:
            KeyError: If the enumeration does not declare ``key``
        """
        table = self.table
        if table is None or key not in table.fields:
            raise KeyError(key)
        if key in table.references:
            return self.references.get(key)
        return self.meta.get(key, "")

    def __getattr__(self, name: str) -> Any:
        # only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        table = self.__dict__.get("table")
        if table is not None:
            key = table.field_for_attribute(name)
            if key is not None:
                return self.typed_field(key)
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def parent_or_self(self) -> "Member":
        """The parent member, or this member when it is a root."""
        if self.parent is not None:
            return self.parent
        return self

    def ancestors(self) -> list["Member"]:
        """Parents from nearest to the root."""
        chain = []
        current = self.parent
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """
        Member document.

        ``Description`` and ``Meta`` are omitted when empty. Typed fields
        are emitted by their declared names; reference fields and the
        parent are left out.
        """
        result: dict[str, Any] = {"Value": str(self.id)}
        if self.description:
            result["Description"] = self.description
        if self.meta:
            result["Meta"] = dict(self.meta)
        result["Name"] = self.name
        result["SortOrder"] = self.sort_order
        if self.table is not None:
            for key in self.table.fields:
                if key not in self.table.references:
                    result[key] = self.meta.get(key, "")
        return result

    def __repr__(self) -> str:
        return f"Member(id={str(self.id)!r}, name={self.name!r})"
