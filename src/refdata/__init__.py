"""
RefData - Insurance Reference-Data Enumerations

A catalog of closed enumerations (states, marital statuses, coverages,
error codes and many more) with wire-safe identifiers.

Each enumeration is an ``EnumerationTable`` loaded from a YAML file. Every
table provides two identifier types:

- ``table.ID``: strict; encoding or decoding an unknown value raises.
- ``table.ValidatedID``: tolerant; unknown input is captured and reported
  later through ``validate_fields``.

Usage:
    from refdata.tables import State
    State.by_id_string("va").name        # 'Virginia'
    State.ID.from_json(b'"VA"')          # StateID('VA')
"""

__version__ = "1.0.0"

from .catalog import Catalog, CatalogLoader, default_catalog, load_catalog
from .exceptions import (
    CatalogLoadError,
    CatalogReferenceError,
    CatalogValidationError,
    CatalogVersionMismatch,
    CodecError,
    DecodeInvalidError,
    DecodeMalformedError,
    EncodeInvalidError,
    EnumerationNotFoundError,
    InvalidDocumentError,
    RefDataError,
    UnsupportedLookupError,
)
from .extensions import (
    IncidentCategory,
    IncidentClass,
    ServiceLogArea,
    describe_error_code,
    incident_category,
    incident_class,
    is_insurable_state,
    is_more_urgent_than,
    mileage_range,
    occupation_by_description,
    occupation_by_keyword,
    service_log_area,
)
from .family import FamilyStructure
from .logging_setup import configure_logging
from .models import EnumerationTable, EnumID, Member, ValidatedEnumID
from .validation import validate_fields

__all__ = [
    "__version__",
    # Catalog
    "Catalog",
    "CatalogLoader",
    "default_catalog",
    "load_catalog",
    # Models
    "EnumerationTable",
    "EnumID",
    "Member",
    "ValidatedEnumID",
    # Extensions
    "describe_error_code",
    "is_insurable_state",
    "is_more_urgent_than",
    "mileage_range",
    "occupation_by_description",
    "occupation_by_keyword",
    "service_log_area",
    "incident_category",
    "incident_class",
    "IncidentCategory",
    "IncidentClass",
    "ServiceLogArea",
    "FamilyStructure",
    "validate_fields",
    "configure_logging",
    # Exceptions
    "RefDataError",
    "CatalogLoadError",
    "CatalogValidationError",
    "CatalogVersionMismatch",
    "CatalogReferenceError",
    "EnumerationNotFoundError",
    "UnsupportedLookupError",
    "InvalidDocumentError",
    "CodecError",
    "EncodeInvalidError",
    "DecodeInvalidError",
    "DecodeMalformedError",
]
