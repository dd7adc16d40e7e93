"""
RefData Enumeration Extensions

Lookups that belong to one particular enumeration and cannot be expressed
in its catalog file: insurable states, mileage ranges, occupation search,
log-level urgency and error-code text. Also the closed value sets of the
incident and service metadata fields.

Every function takes an optional ``catalog`` and falls back to the default
catalog.
"""
from __future__ import annotations

import re
import threading
import weakref
from enum import Enum
from typing import Optional, Union

from .catalog.registry import Catalog, default_catalog
from .models import EnumID, Member, ValidatedEnumID


IdentifierLike = Union[EnumID, ValidatedEnumID, str, None]


def _catalog(catalog: Optional[Catalog]) -> Catalog:
    return catalog if catalog is not None else default_catalog()


# =============================================================================
# State
# =============================================================================

INSURABLE_STATES = frozenset({"VA", "TX", "MD", "IL", "IN", "TN", "OH", "GA"})


def is_insurable_state(state_id: IdentifierLike, catalog: Optional[Catalog] = None) -> bool:
    """True if the state resolves and policies are written there."""
    if state_id is None or str(state_id) == "":
        return False
    state = _catalog(catalog)["State"].by_id(state_id)
    if state is None:
        return False
    return str(state.id) in INSURABLE_STATES


# =============================================================================
# Vehicle Mileage
# =============================================================================

# (exclusive upper bound, member name); anything above the last bound is
# MoreThan20000
MILEAGE_BANDS = (
    (4000, "LessThan4000"),
    (6000, "From4000To5999"),
    (8000, "From6000To7999"),
    (10000, "From8000To9999"),
    (12000, "From10000To11999"),
    (15000, "From12000To14999"),
    (20000, "From15000To19999"),
)


def mileage_range(miles: Optional[int], catalog: Optional[Catalog] = None) -> Optional[EnumID]:
    """Vehicle-mileage ID for an annual mileage, or ``None`` if not given."""
    if miles is None:
        return None
    table = _catalog(catalog)["VehicleMileage"]
    for bound, name in MILEAGE_BANDS:
        if miles < bound:
            return table.by_name(name).id.clone()
    return table.MoreThan20000.id.clone()


# =============================================================================
# Incident
# =============================================================================

INCIDENT_CATEGORY_KEY = "Category"
INCIDENT_CLASSIFICATION_KEY = "Classification"


class IncidentCategory(str, Enum):
    """Values of the incident ``Category`` metadata field."""
    ACCIDENT_OR_CLAIM = "Accidents/Claims"
    MINOR_VIOLATION = "Minor Violations"
    MAJOR_VIOLATION = "Major Violations"
    OTHER_VIOLATION = "Other Violations"


class IncidentClass(str, Enum):
    """Rating classes found in the incident ``Classification`` metadata field."""
    AT_FAULT = "AFA"
    DUI = "DUI"
    MINOR = "MIN"
    MAJOR = "MAJ"
    NON_CHARGEABLE_ACCIDENT = "NCA"
    NON_CHARGEABLE_CONVICTION = "NCC"


def incident_category(incident_id: IdentifierLike, catalog: Optional[Catalog] = None) -> Optional[IncidentCategory]:
    """Category of an incident, or ``None`` if the ID does not resolve."""
    incident = _catalog(catalog)["Incident"].by_id(incident_id)
    if incident is None:
        return None
    return IncidentCategory(incident.meta[INCIDENT_CATEGORY_KEY])


def incident_class(incident_id: IdentifierLike, catalog: Optional[Catalog] = None) -> Optional[IncidentClass]:
    """
    Rating class of an incident.

    Returns ``None`` if the ID does not resolve or the incident carries a
    classification outside ``IncidentClass`` (e.g. "NON").
    """
    incident = _catalog(catalog)["Incident"].by_id(incident_id)
    if incident is None:
        return None
    try:
        return IncidentClass(incident.meta[INCIDENT_CLASSIFICATION_KEY])
    except ValueError:
        return None


# =============================================================================
# Service
# =============================================================================

SERVICE_LOG_AREA_KEY = "LogArea"


class ServiceLogArea(str, Enum):
    """Log areas: groups of log tables shared by related services."""
    MICROSERVICE = "microservice"
    NONE = "none"
    REAL_TIME_BIDDING = "rtb"
    SINGLE_SEARCH = "singlesearch"
    WALLBOARD = "wallboard"


def service_log_area(service_id: IdentifierLike, catalog: Optional[Catalog] = None) -> Optional[ServiceLogArea]:
    """Log area of a service, or ``None`` if the ID does not resolve."""
    service = _catalog(catalog)["Service"].by_id(service_id)
    if service is None:
        return None
    return ServiceLogArea(service.meta[SERVICE_LOG_AREA_KEY])


# =============================================================================
# Occupation
# =============================================================================

_WORD_CHARACTER = re.compile(r"\w")


def normalize_occupation_key(text: str) -> str:
    """Keep word characters only, lower-cased (``"Actor / Actress"`` -> ``"actoractress"``)."""
    return "".join(_WORD_CHARACTER.findall(text)).lower()


class OccupationIndex:
    """Description and keyword indices over the occupation enumeration."""

    def __init__(self, catalog: Catalog):
        self.by_description: dict[str, EnumID] = {}
        self.by_keyword: dict[str, EnumID] = {}
        for member in catalog["Occupation"]:
            self.by_description[normalize_occupation_key(member.description)] = member.id
            keywords = member.meta.get("Keywords", "")
            if not keywords:
                continue
            # duplicate keywords are not detected: the last member wins
            for token in keywords.split(","):
                key = normalize_occupation_key(token)
                if key:
                    self.by_keyword[key] = member.id


_occupation_indices: "weakref.WeakKeyDictionary[Catalog, OccupationIndex]" = weakref.WeakKeyDictionary()
_occupation_lock = threading.Lock()


def _occupation_index(catalog: Catalog) -> OccupationIndex:
    index = _occupation_indices.get(catalog)
    if index is None:
        with _occupation_lock:
            index = _occupation_indices.get(catalog)
            if index is None:
                index = OccupationIndex(catalog)
                _occupation_indices[catalog] = index
    return index


def occupation_by_description(title: str, catalog: Optional[Catalog] = None) -> Optional[EnumID]:
    """Occupation ID whose description matches ``title`` ignoring case and punctuation."""
    rtn = _occupation_index(_catalog(catalog)).by_description.get(normalize_occupation_key(title))
    return rtn.clone() if rtn is not None else None


def occupation_by_keyword(keyword: str, catalog: Optional[Catalog] = None) -> Optional[EnumID]:
    """Occupation ID listing ``keyword`` among its keywords."""
    rtn = _occupation_index(_catalog(catalog)).by_keyword.get(normalize_occupation_key(keyword))
    return rtn.clone() if rtn is not None else None


# =============================================================================
# Log Level
# =============================================================================

def is_more_urgent_than(level: Optional[Member], other: Optional[Member]) -> bool:
    """
    True if ``level`` is more urgent than ``other`` (lower sort order).

    An absent level is never more urgent; anything is more urgent than an
    absent other.
    """
    if level is None:
        return False
    if other is None:
        return True
    return level.sort_order < other.sort_order


# =============================================================================
# Common Error Code
# =============================================================================

INVALID_ERROR_CODE_TEXT = "invalid common error code"


def describe_error_code(code_id: IdentifierLike, catalog: Optional[Catalog] = None) -> str:
    """Uniform log text for an error code: ``"<id>: <description>"``."""
    if code_id is None:
        return INVALID_ERROR_CODE_TEXT
    code = _catalog(catalog)["CommonErrorCode"].by_id(code_id)
    if code is None:
        return INVALID_ERROR_CODE_TEXT
    return f"{code.id}: {code.description}"
