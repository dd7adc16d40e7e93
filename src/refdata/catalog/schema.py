"""
RefData Catalog Schemas

Pydantic models for validating enumeration catalog YAML/JSON files.

Each file describes one enumeration: its header (name, accessor,
description), the typed metadata fields and cross-enumeration references
it declares, and its members in declaration order.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Member Schema
# =============================================================================

class MemberSchema(BaseModel):
    """One member of an enumeration."""
    id: str = Field(..., description="Canonical identifier as it travels on the wire")
    name: str = Field(..., description="Programmatic label, a valid identifier")
    description: str = ""
    sort_order: int = 0
    parent: Optional[str] = Field(None, description="ID of the parent member")
    meta: dict[str, str] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v:
            raise ValueError("member id must not be empty")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"member name '{v}' is not a valid identifier")
        return v

    model_config = {
        "extra": "forbid",
    }


class SubsetSchema(BaseModel):
    """Named sub-collection of an enumeration's members."""
    name: str
    description: str = ""
    members: list[str] = Field(..., min_length=1, description="Member names, in order")

    model_config = {
        "extra": "forbid",
    }


# =============================================================================
# Enumeration Schema
# =============================================================================

class EnumerationSchema(BaseModel):
    """
    Complete enumeration file schema.

    This is the root schema for catalog YAML/JSON files.
    """
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    name: str = Field(..., description="Programmatic label (e.g., 'EnumState')")
    accessor: str = Field(..., description="Registry key (e.g., 'State')")
    description: str = ""
    hierarchical: bool = False

    typed_fields: list[str] = Field(default_factory=list, alias="fields")
    references: dict[str, str] = Field(
        default_factory=dict,
        description="Typed field name -> accessor of the referenced enumeration",
    )
    aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Decode-only spelling -> canonical member ID",
    )
    subsets: dict[str, SubsetSchema] = Field(default_factory=dict)

    items: list[MemberSchema] = Field(default_factory=list)

    @field_validator("accessor")
    @classmethod
    def validate_accessor(cls, v: str) -> str:
        if not v.isidentifier() or v.startswith("_"):
            raise ValueError(f"accessor '{v}' is not a public identifier")
        return v

    @model_validator(mode="after")
    def validate_members(self) -> "EnumerationSchema":
        """Check member uniqueness, declared fields, parents and aliases."""
        errors = []

        ids: dict[str, MemberSchema] = {}
        names: set[str] = set()
        for item in self.items:
            key = item.id.lower()
            if key in ids:
                errors.append(f"Duplicate ID (case-insensitive): '{item.id}'")
            ids[key] = item
            if item.name in names:
                errors.append(f"Duplicate name: '{item.name}'")
            names.add(item.name)

            for typed_field in self.typed_fields:
                if typed_field not in item.meta:
                    errors.append(f"Member '{item.id}' is missing field '{typed_field}'")

            if item.parent is not None:
                if not self.hierarchical:
                    errors.append(f"Member '{item.id}' has a parent but the enumeration is not hierarchical")
                elif item.parent.lower() not in {i.id.lower() for i in self.items}:
                    errors.append(f"Member '{item.id}' references non-existent parent '{item.parent}'")

        for typed_field in self.references:
            if typed_field not in self.typed_fields:
                errors.append(f"Reference '{typed_field}' is not a declared field")

        for alias, target in self.aliases.items():
            if alias.lower() in ids:
                errors.append(f"Alias '{alias}' collides with a member ID")
            if target.lower() not in ids:
                errors.append(f"Alias '{alias}' targets non-existent member '{target}'")

        for accessor, subset in self.subsets.items():
            for member_name in subset.members:
                if member_name not in names:
                    errors.append(f"Subset '{accessor}' names non-existent member '{member_name}'")

        errors.extend(self._parent_cycles(ids))

        if errors:
            raise ValueError("; ".join(errors))
        return self

    def _parent_cycles(self, ids: dict[str, MemberSchema]) -> list[str]:
        errors = []
        for item in self.items:
            seen = {item.id.lower()}
            current = item.parent
            while current is not None:
                key = current.lower()
                if key in seen:
                    errors.append(f"Parent cycle through member '{item.id}'")
                    break
                seen.add(key)
                parent = ids.get(key)
                current = parent.parent if parent is not None else None
        return errors

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_enumeration(data: dict[str, Any]) -> EnumerationSchema:
    """
    Validate an enumeration dictionary against the schema.

    Args:
        data: Dictionary loaded from YAML/JSON

    Returns:
        Validated EnumerationSchema

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return EnumerationSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """
    Check if an enumeration file's schema version is compatible.

    Args:
        data: Dictionary with schema_version field

    Returns:
        True if compatible, False otherwise
    """
    file_version = str(data.get("schema_version", SCHEMA_VERSION))
    return file_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
