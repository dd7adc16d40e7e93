"""
RefData Catalog Loader

Loads and validates enumeration files from YAML or JSON.

Converts Pydantic schema models to RefData enumeration tables and resolves
cross-enumeration references, building referenced tables first.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import (
    CatalogLoadError,
    CatalogReferenceError,
    CatalogValidationError,
    CatalogVersionMismatch,
)
from ..models import EnumerationTable, Member
from .registry import Catalog
from .schema import (
    SCHEMA_VERSION,
    EnumerationSchema,
    MemberSchema,
    check_schema_version,
    validate_enumeration,
)

logger = logging.getLogger(__name__)


CATALOG_SUFFIXES = {".yaml", ".yml", ".json"}


# =============================================================================
# Build Order
# =============================================================================

def build_order(schemas: Iterable[EnumerationSchema]) -> list[EnumerationSchema]:
    """
    Order enumerations so every referenced table is built before its users.

    Ties keep the input order.

    Raises:
        CatalogReferenceError: If a reference names an unknown enumeration
            or enumerations reference each other in a cycle
    """
    by_accessor = {schema.accessor: schema for schema in schemas}

    missing = []
    for schema in by_accessor.values():
        for typed_field, target in schema.references.items():
            if target not in by_accessor:
                missing.append(f"{schema.accessor}.{typed_field} -> {target}")
    if missing:
        raise CatalogReferenceError(
            message="References to unknown enumerations",
            details={"errors": missing},
        )

    ordered: list[EnumerationSchema] = []
    done: set[str] = set()
    visiting: set[str] = set()

    def visit(accessor: str, path: list[str]) -> None:
        if accessor in done:
            return
        if accessor in visiting:
            raise CatalogReferenceError(
                message="Reference cycle between enumerations",
                details={"cycle": path + [accessor]},
                enumeration=accessor,
            )
        visiting.add(accessor)
        schema = by_accessor[accessor]
        for target in schema.references.values():
            if target != accessor:
                visit(target, path + [accessor])
        visiting.discard(accessor)
        done.add(accessor)
        ordered.append(schema)

    for accessor in by_accessor:
        visit(accessor, [])
    return ordered


# =============================================================================
# Schema to Table Conversion
# =============================================================================

def _convert_member(table: EnumerationTable, item: MemberSchema) -> Member:
    return Member(
        id=table.ID(item.id),
        description=item.description,
        name=item.name,
        sort_order=item.sort_order,
        meta=item.meta,
        table=table,
    )


def _resolve_references(
    schema: EnumerationSchema,
    table: EnumerationTable,
    item: MemberSchema,
    catalog: Catalog,
) -> dict[str, Member]:
    references = {}
    for typed_field, target in schema.references.items():
        target_table = table if target == schema.accessor else catalog.get(target)
        value = item.meta.get(typed_field, "")
        referenced = target_table.by_id_string(value) if target_table is not None else None
        if referenced is None:
            raise CatalogReferenceError(
                message=f"Member '{item.id}' field '{typed_field}' does not resolve in {target}",
                details={"member": item.id, "field": typed_field, "value": value},
                enumeration=schema.name,
            )
        references[typed_field] = referenced
    return references


def convert_enumeration(schema: EnumerationSchema, catalog: Catalog) -> EnumerationTable:
    """
    Build the table described by ``schema``.

    Tables named in ``schema.references`` must already be in ``catalog``.

    Raises:
        CatalogValidationError: If members collide
        CatalogReferenceError: If a reference field does not resolve
    """
    table = EnumerationTable(
        name=schema.name,
        accessor=schema.accessor,
        description=schema.description,
        fields=schema.typed_fields,
        references=schema.references,
        hierarchical=schema.hierarchical,
    )

    members = [_convert_member(table, item) for item in schema.items]
    by_lower_id = {str(member.id).lower(): member for member in members}
    aliases = {alias: by_lower_id[target.lower()] for alias, target in schema.aliases.items()}
    table.install(members, aliases)

    for member, item in zip(members, schema.items):
        if item.parent is not None:
            member.parent = by_lower_id[item.parent.lower()]

    # references to the same table resolve only once it is populated
    for member, item in zip(members, schema.items):
        member.references = MappingProxyType(_resolve_references(schema, table, item, catalog))

    for accessor, subset in schema.subsets.items():
        table.add_subset(accessor, subset.name, subset.members, subset.description)

    logger.debug(f"Built {schema.name} ({len(table)} members)", extra={"enumeration": schema.name})
    return table


# =============================================================================
# Catalog Loader
# =============================================================================

class CatalogLoader:
    """
    Loads enumeration files and assembles them into a catalog.

    Usage:
        loader = CatalogLoader()
        catalog = loader.load_directory("path/to/catalog")
        state = catalog["State"]
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject files with incompatible schema versions
        """
        self.strict_version = strict_version

        # Cache of validated schemas by accessor
        self._schemas: dict[str, EnumerationSchema] = {}

    def load(self, path: Union[str, Path]) -> EnumerationSchema:
        """
        Load and validate one enumeration file.

        Args:
            path: Path to YAML or JSON file

        Returns:
            Validated EnumerationSchema

        Raises:
            CatalogLoadError: If file cannot be read
            CatalogValidationError: If validation fails
            CatalogVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise CatalogLoadError(
                message=f"Failed to load enumeration file: {e}",
                details={"path": str(path), "error": str(e)},
            )

        schema = self.validate(data, str(path))
        self._schemas[schema.accessor] = schema
        return schema

    def validate(self, data: Any, source: str = "<string>") -> EnumerationSchema:
        """
        Validate already-parsed data.

        Raises:
            CatalogValidationError: If validation fails
            CatalogVersionMismatch: If schema version incompatible
        """
        if not isinstance(data, dict):
            raise CatalogValidationError(
                message="Enumeration file must contain a mapping",
                details={"path": source},
            )

        if self.strict_version and not check_schema_version(data):
            file_version = data.get("schema_version", "unknown")
            raise CatalogVersionMismatch(
                message=f"Schema version mismatch: file has {file_version}, expected {SCHEMA_VERSION}",
                details={
                    "file_version": file_version,
                    "expected_version": SCHEMA_VERSION,
                    "path": source,
                },
                enumeration=data.get("name"),
            )

        try:
            return validate_enumeration(data)
        except ValidationError as e:
            raise CatalogValidationError(
                message=f"Enumeration validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_context=False), "path": source},
                enumeration=data.get("name"),
            )

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    def load_directory(self, directory: Union[str, Path]) -> Catalog:
        """
        Load every enumeration file in a directory into a new catalog.

        Args:
            directory: Directory containing *.yaml, *.yml or *.json files

        Returns:
            Fully built Catalog

        Raises:
            CatalogLoadError: If the directory cannot be read
            CatalogValidationError: If a file fails validation or accessors collide
            CatalogReferenceError: If references cannot be resolved
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise CatalogLoadError(
                message=f"Catalog directory not found: {directory}",
                details={"path": str(directory)},
            )

        paths = sorted(p for p in directory.iterdir() if p.suffix.lower() in CATALOG_SUFFIXES)
        schemas = []
        seen: dict[str, Path] = {}
        for path in paths:
            schema = self.load(path)
            if schema.accessor in seen:
                raise CatalogValidationError(
                    message=f"Duplicate accessor '{schema.accessor}'",
                    details={"paths": [str(seen[schema.accessor]), str(path)]},
                    enumeration=schema.name,
                )
            seen[schema.accessor] = path
            schemas.append(schema)

        catalog = self.build(schemas)
        logger.info(f"Loaded catalog from {directory} ({len(catalog)} enumerations)")
        return catalog

    def build(self, schemas: Iterable[EnumerationSchema]) -> Catalog:
        """
        Convert validated schemas into a catalog, referenced tables first.

        Raises:
            CatalogValidationError: If members collide
            CatalogReferenceError: If references cannot be resolved
        """
        catalog = Catalog()
        for schema in build_order(schemas):
            catalog.register(convert_enumeration(schema, catalog))
        return catalog

    def get_schema(self, accessor: str) -> Optional[EnumerationSchema]:
        """Get a cached schema by accessor."""
        return self._schemas.get(accessor)

    def list_schemas(self) -> list[str]:
        """List accessors of all loaded files."""
        return list(self._schemas.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_catalog(
    directory: Union[str, Path],
    strict_version: bool = True,
) -> Catalog:
    """
    Load a catalog directory.

    Convenience function that creates a temporary loader.

    Args:
        directory: Directory of enumeration files
        strict_version: If True, reject files with incompatible schema versions

    Returns:
        Loaded Catalog
    """
    loader = CatalogLoader(strict_version=strict_version)
    return loader.load_directory(directory)


def load_enumeration_from_string(
    content: str,
    format: str = "yaml",
    catalog: Optional[Catalog] = None,
) -> EnumerationTable:
    """
    Load a single enumeration from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
        catalog: Catalog holding any tables the enumeration references

    Returns:
        Built EnumerationTable (not registered in ``catalog``)
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as e:
        raise CatalogLoadError(
            message=f"Failed to parse enumeration: {e}",
            details={"format": format, "error": str(e)},
        )

    loader = CatalogLoader()
    schema = loader.validate(data)
    catalog = catalog if catalog is not None else Catalog()

    missing = [target for target in schema.references.values()
               if target != schema.accessor and target not in catalog]
    if missing:
        raise CatalogReferenceError(
            message="References to unknown enumerations",
            details={"errors": missing},
            enumeration=schema.name,
        )
    return convert_enumeration(schema, catalog)
