"""
Family Structure Flags

Four optional booleans describing the children in a household, packed
into a bit field for storage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


FAMILY_HAS_LITTLE_ONES = 1
FAMILY_HAS_PRE_TEENS = 2
FAMILY_HAS_TEENS = 4
FAMILY_HAS_YOUNG_ADULTS = 8


@dataclass
class FamilyStructure:
    """Household composition; ``None`` means not answered."""
    has_little_ones: Optional[bool] = None
    has_pre_teens: Optional[bool] = None
    has_teens: Optional[bool] = None
    has_young_adults: Optional[bool] = None

    def to_int(self) -> int:
        """Pack into flags. Unanswered counts as false."""
        rtn = 0
        if self.has_little_ones:
            rtn += FAMILY_HAS_LITTLE_ONES
        if self.has_pre_teens:
            rtn += FAMILY_HAS_PRE_TEENS
        if self.has_teens:
            rtn += FAMILY_HAS_TEENS
        if self.has_young_adults:
            rtn += FAMILY_HAS_YOUNG_ADULTS
        return rtn

    @classmethod
    def from_int(cls, flags: int) -> "FamilyStructure":
        """Unpack flags; every attribute of the result is set."""
        return cls(
            has_little_ones=(flags & FAMILY_HAS_LITTLE_ONES) > 0,
            has_pre_teens=(flags & FAMILY_HAS_PRE_TEENS) > 0,
            has_teens=(flags & FAMILY_HAS_TEENS) > 0,
            has_young_adults=(flags & FAMILY_HAS_YOUNG_ADULTS) > 0,
        )
