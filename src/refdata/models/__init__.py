"""
RefData domain models.

Enumeration tables, their members, and the strict and validated
identifier types every table creates.
"""

from .identifiers import EnumID, ValidatedEnumID
from .member import Member, attribute_name
from .table import (
    ALTERNATIVE_KEYS_FIELD,
    EnumerationTable,
    by_id,
    by_id_string,
    by_index,
)

__all__ = [
    "ALTERNATIVE_KEYS_FIELD",
    "EnumID",
    "EnumerationTable",
    "Member",
    "ValidatedEnumID",
    "attribute_name",
    "by_id",
    "by_id_string",
    "by_index",
]
