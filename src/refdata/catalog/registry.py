"""
RefData Catalog Registry

A ``Catalog`` maps accessor names (``"State"``) to built enumeration
tables. The process-wide default catalog is loaded from the packaged data
directory (or ``REFDATA_CATALOG_DIR``) on first use and shared afterwards.
"""
from __future__ import annotations

import threading
from typing import Iterator, Optional

from ..exceptions import CatalogValidationError, EnumerationNotFoundError
from ..models import EnumerationTable


class Catalog:
    """
    Registry of enumeration tables keyed by accessor.

    Usage:
        catalog["State"].by_id_string("va")
        catalog.State.Virginia
    """

    def __init__(self) -> None:
        self._tables: dict[str, EnumerationTable] = {}

    def register(self, table: EnumerationTable) -> None:
        """
        Add a table and its subsets.

        Raises:
            CatalogValidationError: If the accessor is already registered
        """
        entries = [(table.accessor, table)] + list(table.subsets.items())
        for accessor, entry in entries:
            if accessor in self._tables:
                raise CatalogValidationError(
                    message=f"Duplicate accessor '{accessor}'",
                    enumeration=entry.name,
                )
        for accessor, entry in entries:
            self._tables[accessor] = entry

    def get(self, accessor: str) -> Optional[EnumerationTable]:
        return self._tables.get(accessor)

    def __getitem__(self, accessor: str) -> EnumerationTable:
        table = self._tables.get(accessor)
        if table is None:
            raise EnumerationNotFoundError(
                message=f"Unknown enumeration '{accessor}'",
                details={"available": sorted(self._tables)},
            )
        return table

    def __getattr__(self, name: str) -> EnumerationTable:
        if name.startswith("_"):
            raise AttributeError(name)
        table = self.__dict__.get("_tables", {}).get(name)
        if table is None:
            raise AttributeError(f"catalog has no enumeration {name!r}")
        return table

    def find(self, name: str) -> Optional[EnumerationTable]:
        """Table by accessor, or case-insensitively by accessor or table name."""
        table = self._tables.get(name)
        if table is not None:
            return table
        key = name.lower()
        for table in self._tables.values():
            if table.accessor.lower() == key or table.name.lower() == key:
                return table
        return None

    def accessors(self) -> list[str]:
        return list(self._tables.keys())

    def tables(self) -> list[EnumerationTable]:
        return list(self._tables.values())

    def __contains__(self, accessor: object) -> bool:
        return accessor in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"Catalog(enumerations={len(self._tables)})"


# =============================================================================
# Default Catalog
# =============================================================================

_default_catalog: Optional[Catalog] = None
_default_lock = threading.Lock()


def default_catalog() -> Catalog:
    """
    The shared catalog built from the configured data directory.

    Loaded once; later calls return the same instance.
    """
    global _default_catalog
    catalog = _default_catalog
    if catalog is None:
        with _default_lock:
            if _default_catalog is None:
                from .. import config
                from .loader import load_catalog

                _default_catalog = load_catalog(
                    config.CATALOG_DIR,
                    strict_version=config.STRICT_VERSION,
                )
            catalog = _default_catalog
    return catalog


def reset_default_catalog() -> None:
    """Drop the shared catalog so the next access reloads it."""
    global _default_catalog
    with _default_lock:
        _default_catalog = None
