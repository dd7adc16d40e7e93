"""
RefData Enumeration Tables

An ``EnumerationTable`` is the ordered, immutable set of members of one
enumeration kind, with O(1) lookups by canonical ID (case-insensitive),
by position and by programmatic name.

Tables are populated exactly once by the catalog loader and treated as
read-only afterwards, so concurrent readers need no coordination. The
only lazily built structure, the alternative-key index, is built once
under a lock and read lock-free after that.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from ..exceptions import CatalogValidationError, UnsupportedLookupError
from .identifiers import EnumID, ValidatedEnumID
from .member import Member, attribute_name

logger = logging.getLogger(__name__)


ALTERNATIVE_KEYS_FIELD = "AlternativeKeys"

Identifier = Union[EnumID, ValidatedEnumID, Member, str]


class EnumerationTable:
    """
    The members of one enumeration plus their lookup indices.

    Usage:
        State.by_id_string("va")       # -> Member for Virginia
        State.Virginia.id              # -> StateID('VA')
        State.ID.from_json('"VA"')     # -> StateID('VA')
        State.by_index(0)              # -> first declared member

    Attributes:
        name: Programmatic label of the table (e.g. "EnumState")
        accessor: Registry key and attribute name (e.g. "State")
        description: Human-readable label for the enumeration kind
        fields: Declared typed metadata fields, in declaration order
        references: Reference fields mapped to the accessor of their table
        ID: Strict identifier type for this table
        ValidatedID: Validated identifier type for this table
    """

    def __init__(
        self,
        name: str,
        accessor: str,
        description: str = "",
        fields: Iterable[str] = (),
        references: Optional[Mapping[str, str]] = None,
        hierarchical: bool = False,
        id_types: Optional[tuple[type[EnumID], type[ValidatedEnumID]]] = None,
    ):
        self.name = name
        self.accessor = accessor
        self.description = description
        self.fields: tuple[str, ...] = tuple(fields)
        self.references: dict[str, str] = dict(references or {})
        self.hierarchical = hierarchical

        if id_types is None:
            id_type = type(f"{accessor}ID", (EnumID,), {"__slots__": (), "table": self})
            validated_type = type(
                f"Validated{accessor}ID",
                (ValidatedEnumID,),
                {"__slots__": (), "table": self, "id_type": id_type},
            )
            id_types = (id_type, validated_type)
        self.ID, self.ValidatedID = id_types

        self.items: tuple[Member, ...] = ()
        self._by_lower_id: dict[str, Member] = {}
        self._by_name: dict[str, Member] = {}
        self._aliases: dict[str, Member] = {}
        self._subsets: dict[str, EnumerationTable] = {}
        self._attribute_fields = {attribute_name(f): f for f in self.fields}
        self._installed = False

        self._alternative_keys: Optional[dict[str, EnumID]] = None
        self._alternative_keys_lock = threading.Lock()

    # =========================================================================
    # Construction
    # =========================================================================

    def install(
        self,
        members: Iterable[Member],
        aliases: Optional[Mapping[str, Member]] = None,
    ) -> None:
        """
        Populate the table. Called once by the loader.

        Raises:
            CatalogValidationError: If called twice or IDs/names collide
        """
        if self._installed:
            raise CatalogValidationError(
                message="enumeration table is already populated",
                enumeration=self.name,
            )

        items = tuple(members)
        by_lower_id: dict[str, Member] = {}
        by_name: dict[str, Member] = {}
        errors = []
        for member in items:
            key = str(member.id).lower()
            if key in by_lower_id:
                errors.append(f"Duplicate ID (case-insensitive): '{member.id}'")
            by_lower_id[key] = member
            if member.name in by_name:
                errors.append(f"Duplicate name: '{member.name}'")
            by_name[member.name] = member

        alias_index: dict[str, Member] = {}
        for alias, member in (aliases or {}).items():
            key = alias.lower()
            if key in by_lower_id:
                errors.append(f"Alias '{alias}' collides with a member ID")
            alias_index[key] = member

        if errors:
            raise CatalogValidationError(
                message=f"Invalid members for {self.name}",
                details={"errors": errors},
                enumeration=self.name,
            )

        self.items = items
        self._by_lower_id = by_lower_id
        self._by_name = by_name
        self._aliases = alias_index
        self._installed = True

        for member_name in self.shadowed_names():
            logger.debug(
                f"{self.name}: member {member_name} is shadowed by a table attribute; use by_name()",
                extra={"enumeration": self.name},
            )

    def add_subset(
        self,
        accessor: str,
        name: str,
        member_names: Iterable[str],
        description: str = "",
    ) -> "EnumerationTable":
        """
        Register a named sub-collection sharing this table's members and
        identifier types.

        Raises:
            CatalogValidationError: If a member name is unknown
        """
        members = []
        missing = []
        for member_name in member_names:
            member = self._by_name.get(member_name)
            if member is None:
                missing.append(member_name)
            else:
                members.append(member)
        if missing:
            raise CatalogValidationError(
                message=f"Subset {accessor} names unknown members",
                details={"missing": missing},
                enumeration=self.name,
            )

        subset = EnumerationTable(
            name=name,
            accessor=accessor,
            description=description or self.description,
            fields=self.fields,
            references=self.references,
            hierarchical=self.hierarchical,
            id_types=(self.ID, self.ValidatedID),
        )
        subset.install(members)
        self._subsets[accessor] = subset
        return subset

    # =========================================================================
    # Lookups
    # =========================================================================

    def by_id(self, identifier: Optional[Identifier]) -> Optional[Member]:
        """
        Member for anything that yields a canonical ID.

        Identifiers are normalized with ``id()`` first, so invalid ones
        resolve to ``None``. Plain strings go through ``by_id_string``.
        """
        if identifier is None:
            return None
        if isinstance(identifier, Member):
            identifier = identifier.id
        if isinstance(identifier, (EnumID, ValidatedEnumID)):
            normalized = identifier.id()
            if normalized is None:
                return None
            return self._by_lower_id.get(str(normalized).lower())
        return self.by_id_string(identifier)

    def by_id_string(self, idx: Optional[str]) -> Optional[Member]:
        """Member for a raw string, case-insensitively; aliases are accepted."""
        if not idx or not self._by_lower_id:
            return None
        key = str(idx).lower()
        rtn = self._by_lower_id.get(key)
        if rtn is None:
            rtn = self._aliases.get(key)
        return rtn

    def by_index(self, idx: int) -> Optional[Member]:
        """Member at a zero-based position in ``items`` (NOT sort order)."""
        if isinstance(idx, bool) or not isinstance(idx, int):
            return None
        if idx < 0 or idx >= len(self.items):
            return None
        return self.items[idx]

    def by_name(self, name: str) -> Optional[Member]:
        """Member by its programmatic name."""
        return self._by_name.get(name)

    @property
    def has_alternative_keys(self) -> bool:
        return ALTERNATIVE_KEYS_FIELD in self.fields

    @property
    def has_parents(self) -> bool:
        return self.hierarchical

    def by_alternative_key(self, key: Optional[str]) -> Optional[EnumID]:
        """
        Identifier for one of the comma-separated ``AlternativeKeys`` of a
        member, or for its canonical ID.

        The query is trimmed and lower-cased before lookup.

        Raises:
            UnsupportedLookupError: If the table declares no alternative keys
        """
        if not self.has_alternative_keys:
            raise UnsupportedLookupError(
                message="enumeration does not declare alternative keys",
                enumeration=self.name,
            )
        if not key or not self.items:
            return None

        rtn = self._alternative_key_index().get(key.strip().lower())
        if rtn is None:
            return None
        return rtn.clone()

    def _alternative_key_index(self) -> dict[str, EnumID]:
        index = self._alternative_keys
        if index is None:
            with self._alternative_keys_lock:
                if self._alternative_keys is None:
                    self._alternative_keys = self.build_alternative_key_index()
                index = self._alternative_keys
        return index

    def build_alternative_key_index(self) -> dict[str, EnumID]:
        """Map every lower-cased alternative key and canonical ID to its ID."""
        index: dict[str, EnumID] = {}
        for member in self.items:
            index[str(member.id).lower()] = member.id
            keys = member.meta.get(ALTERNATIVE_KEYS_FIELD, "")
            for token in keys.split(","):
                token = token.strip().lower()
                if token:
                    index[token] = member.id
        return index

    # =========================================================================
    # Introspection
    # =========================================================================

    def shadowed_names(self) -> list[str]:
        """Member names that attribute access cannot reach (e.g. 'ID')."""
        return [name for name in self._by_name if hasattr(type(self), name) or name in self.__dict__]

    def field_for_attribute(self, attribute: str) -> Optional[str]:
        """Declared field whose snake-case form is ``attribute``."""
        return self._attribute_fields.get(attribute)

    def ids(self) -> list[EnumID]:
        return [member.id for member in self.items]

    def sorted_items(self) -> list[Member]:
        """Members ordered by sort order (ties keep declaration order)."""
        return sorted(self.items, key=lambda m: m.sort_order)

    @property
    def subsets(self) -> Mapping[str, "EnumerationTable"]:
        return dict(self._subsets)

    def subset(self, accessor: str) -> Optional["EnumerationTable"]:
        return self._subsets.get(accessor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "Description": self.description,
            "Items": [member.to_dict() for member in self.items],
        }

    def __getattr__(self, name: str) -> Member:
        # named accessors: State.Virginia
        if name.startswith("_"):
            raise AttributeError(name)
        members = self.__dict__.get("_by_name")
        if members and name in members:
            return members[name]
        raise AttributeError(f"{self.__dict__.get('name', 'enumeration')} has no member {name!r}")

    def __iter__(self) -> Iterator[Member]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, value: object) -> bool:
        if isinstance(value, Member):
            return any(member is value for member in self.items)
        if isinstance(value, (str, EnumID, ValidatedEnumID)):
            return self.by_id(value) is not None
        return False

    def __repr__(self) -> str:
        return f"EnumerationTable(name={self.name!r}, members={len(self.items)})"


# =============================================================================
# Total Helpers
# =============================================================================
# Same lookups as the methods, but they also accept a missing table.

def by_id(table: Optional[EnumerationTable], identifier: Optional[Identifier]) -> Optional[Member]:
    if table is None:
        return None
    return table.by_id(identifier)


def by_id_string(table: Optional[EnumerationTable], idx: Optional[str]) -> Optional[Member]:
    if table is None:
        return None
    return table.by_id_string(idx)


def by_index(table: Optional[EnumerationTable], idx: int) -> Optional[Member]:
    if table is None:
        return None
    return table.by_index(idx)
