"""
RefData enumeration catalog.

Loading, validation and registration of the enumeration tables.

Usage:
    from refdata.catalog import default_catalog, load_catalog
    catalog = default_catalog()
    catalog["State"].by_id_string("va")
"""

from .loader import (
    CatalogLoader,
    build_order,
    convert_enumeration,
    load_catalog,
    load_enumeration_from_string,
)
from .registry import Catalog, default_catalog, reset_default_catalog
from .schema import (
    SCHEMA_VERSION,
    EnumerationSchema,
    MemberSchema,
    SubsetSchema,
    check_schema_version,
    validate_enumeration,
)

__all__ = [
    "SCHEMA_VERSION",
    "Catalog",
    "CatalogLoader",
    "EnumerationSchema",
    "MemberSchema",
    "SubsetSchema",
    "build_order",
    "check_schema_version",
    "convert_enumeration",
    "default_catalog",
    "load_catalog",
    "load_enumeration_from_string",
    "reset_default_catalog",
    "validate_enumeration",
]
