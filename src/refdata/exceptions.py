"""
RefData Exception Hierarchy

Domain-specific exceptions for the reference-data catalog.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: RD_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


ERROR_MARSHAL_INVALID_ID = "attempted to marshal invalid enumeration ID value"
ERROR_UNMARSHAL_INVALID_ID = "attempted to unmarshal an invalid enumeration ID value"


@dataclass
class RefDataError(Exception):
    """
    Base exception for all RefData errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (RD_*)
        details: Additional context about the error
        enumeration: Name of the enumeration involved, if applicable
    """
    message: str
    code: str = "RD_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    enumeration: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.enumeration:
            parts.append(f"(enumeration: {self.enumeration})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.enumeration:
            result["enumeration"] = self.enumeration
        return result


# =============================================================================
# Catalog Errors
# =============================================================================

@dataclass
class CatalogLoadError(RefDataError):
    """Failed to read a catalog file."""
    code: str = "RD_CATALOG_LOAD_ERROR"


@dataclass
class CatalogValidationError(RefDataError):
    """Catalog file failed schema or integrity validation."""
    code: str = "RD_CATALOG_VALIDATION_ERROR"


@dataclass
class CatalogVersionMismatch(RefDataError):
    """Catalog schema version doesn't match the supported version."""
    code: str = "RD_CATALOG_VERSION_MISMATCH"


@dataclass
class CatalogReferenceError(RefDataError):
    """Cross-enumeration reference could not be resolved."""
    code: str = "RD_CATALOG_REFERENCE_ERROR"


@dataclass
class EnumerationNotFoundError(RefDataError):
    """Requested enumeration is not part of the catalog."""
    code: str = "RD_ENUMERATION_NOT_FOUND"


# =============================================================================
# Lookup Errors
# =============================================================================

@dataclass
class UnsupportedLookupError(RefDataError):
    """The enumeration does not declare the requested lookup."""
    code: str = "RD_UNSUPPORTED_LOOKUP"


@dataclass
class InvalidDocumentError(RefDataError):
    """Argument is not a document that can be walked for identifiers."""
    code: str = "RD_INVALID_DOCUMENT"


# =============================================================================
# Codec Errors
# =============================================================================
# These also derive from ValueError so that pydantic reports them as
# ordinary validation failures.

@dataclass
class CodecError(RefDataError, ValueError):
    """Base class for encode/decode failures of a single identifier."""
    code: str = "RD_CODEC_ERROR"


@dataclass
class EncodeInvalidError(CodecError):
    """A strict identifier carries a non-empty ID that does not resolve."""
    message: str = ERROR_MARSHAL_INVALID_ID
    code: str = "RD_ENCODE_INVALID"


@dataclass
class DecodeInvalidError(CodecError):
    """A decoder observed a non-empty input that does not resolve."""
    message: str = ERROR_UNMARSHAL_INVALID_ID
    code: str = "RD_DECODE_INVALID"


@dataclass
class DecodeMalformedError(CodecError):
    """The underlying JSON or XML input could not be parsed."""
    code: str = "RD_DECODE_MALFORMED"
