"""
Attribute access to the tables of the default catalog.

    from refdata.tables import State, MaritalStatus
    State.Virginia.id

The catalog is loaded the first time a table is requested.
"""
from __future__ import annotations

from .catalog.registry import default_catalog
from .models import EnumerationTable


def __getattr__(name: str) -> EnumerationTable:
    if name.startswith("_"):
        raise AttributeError(name)
    table = default_catalog().get(name)
    if table is None:
        raise AttributeError(f"module {__name__!r} has no enumeration {name!r}")
    return table


def __dir__() -> list[str]:
    return sorted(default_catalog().accessors())
