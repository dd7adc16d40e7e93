"""
Pytest configuration and fixtures for RefData tests.

Provides the packaged catalog, the widget fixture enumeration, and helper
factories for building enumeration documents.
"""
from pathlib import Path
from typing import Any, Optional

import pytest
import yaml

from refdata.catalog import Catalog, default_catalog, load_enumeration_from_string
from refdata.models import EnumerationTable


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =============================================================================
# Factory Helpers
# =============================================================================

def make_item(
    id: str,
    name: str,
    description: str = "",
    sort_order: int = 0,
    parent: Optional[str] = None,
    meta: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """Create a member entry for an enumeration document."""
    item: dict[str, Any] = {
        "id": id,
        "name": name,
        "description": description,
        "sort_order": sort_order,
    }
    if parent is not None:
        item["parent"] = parent
    if meta is not None:
        item["meta"] = meta
    return item


def make_enumeration(
    accessor: str = "Color",
    items: Optional[list[dict[str, Any]]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Create an enumeration document; defaults to a small color table."""
    if items is None:
        items = [
            make_item("red", "Red", "Red", 1),
            make_item("green", "Green", "Green", 2),
            make_item("blue", "Blue", "Blue", 3),
        ]
    data: dict[str, Any] = {
        "schema_version": "1.0.0",
        "name": f"Enum{accessor}",
        "accessor": accessor,
        "description": f"{accessor.lower()} values",
        "items": items,
    }
    data.update(overrides)
    return data


def write_enumeration(directory: Path, data: dict[str, Any], filename: Optional[str] = None) -> Path:
    """Write an enumeration document as YAML and return its path."""
    path = directory / (filename or f"{data['accessor'].lower()}.yaml")
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)
    return path


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def catalog() -> Catalog:
    """The packaged catalog."""
    return default_catalog()


@pytest.fixture(scope="session")
def widget() -> EnumerationTable:
    """Cartoon-family enumeration with parents."""
    content = (FIXTURES_DIR / "widget.yaml").read_text(encoding="utf-8")
    return load_enumeration_from_string(content)


@pytest.fixture
def color() -> EnumerationTable:
    """Three-member enumeration built from a document."""
    return load_enumeration_from_string(yaml.safe_dump(make_enumeration()))
