"""
RefData Configuration

Environment settings, read once at import.
"""
from __future__ import annotations

import os
from pathlib import Path


PACKAGED_CATALOG_DIR = Path(__file__).parent / "catalog" / "data"

CATALOG_DIR = Path(os.getenv("REFDATA_CATALOG_DIR", str(PACKAGED_CATALOG_DIR)))
STRICT_VERSION = os.getenv("REFDATA_STRICT_VERSION", "true").lower() == "true"
LOG_LEVEL = os.getenv("REFDATA_LOG_LEVEL", "WARNING")
LOG_FORMAT = os.getenv("REFDATA_LOG_FORMAT", "json").lower()  # json | text
