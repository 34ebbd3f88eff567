"""
Outcome taxonomy for scored accounts.

Two nested orderings describe every scored account:
  - ``Category``     — coarse outcome label (Super High / High / Medium / Low).
  - ``PriorityBand`` — one of exactly three bands scoped to a Category
    (``H1``–``H3`` under High, ``M1``–``M3`` under Medium, ...).

Lower rank sorts first: Super High before High before Medium before Low, and
band 1 before band 2 before band 3 within a category.

``VerticalSlug`` names the three business verticals a profile can target.

This module has NO imports from any other ``propensity_engine`` package.
"""

from enum import StrEnum


class VerticalSlug(StrEnum):
    """Business vertical served by a prediction backend."""

    HEALTHCARE = "healthcare"
    """Patient collectability (propensity to pay a hospital balance)."""

    RPC = "rpc"
    """Financial right-party-contact likelihood."""

    UTILITY = "utility"
    """Utility customer payment propensity."""


class Category(StrEnum):
    """Coarse-grained outcome label, totally ordered by ``rank``."""

    SUPER_HIGH = "Super High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Sort rank; lower sorts first."""
        return _CATEGORY_RANK[self]

    @property
    def is_favorable(self) -> bool:
        """True for categories that represent a favourable outcome."""
        return self in (Category.SUPER_HIGH, Category.HIGH)


_CATEGORY_RANK: dict[Category, int] = {
    Category.SUPER_HIGH: 0,
    Category.HIGH: 1,
    Category.MEDIUM: 2,
    Category.LOW: 3,
}


class PriorityBand(StrEnum):
    """Fine-grained rank (1–3) nested inside a Category."""

    SH1 = "SH1"
    SH2 = "SH2"
    SH3 = "SH3"
    H1 = "H1"
    H2 = "H2"
    H3 = "H3"
    M1 = "M1"
    M2 = "M2"
    M3 = "M3"
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"

    @property
    def level(self) -> int:
        """Band number within its category (1 = highest priority)."""
        return int(self.value[-1])

    @property
    def category(self) -> Category:
        return _BAND_PREFIX[self.value[:-1]]


_BAND_PREFIX: dict[str, Category] = {
    "SH": Category.SUPER_HIGH,
    "H": Category.HIGH,
    "M": Category.MEDIUM,
    "L": Category.LOW,
}

_BANDS_BY_CATEGORY: dict[Category, tuple[PriorityBand, PriorityBand, PriorityBand]] = {
    Category.SUPER_HIGH: (PriorityBand.SH1, PriorityBand.SH2, PriorityBand.SH3),
    Category.HIGH: (PriorityBand.H1, PriorityBand.H2, PriorityBand.H3),
    Category.MEDIUM: (PriorityBand.M1, PriorityBand.M2, PriorityBand.M3),
    Category.LOW: (PriorityBand.L1, PriorityBand.L2, PriorityBand.L3),
}


def bands_for(category: Category) -> tuple[PriorityBand, PriorityBand, PriorityBand]:
    """Return the three band labels scoped to ``category``, highest first."""
    return _BANDS_BY_CATEGORY[category]
