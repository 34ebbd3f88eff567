"""
Vertical profiles — one per business vertical served by a prediction backend.

Modules
-------
profile    : VerticalProfile dataclass, ClassificationMode, parsing helpers.
healthcare : Patient collectability (threshold classification).
rpc        : Right-party contact (pass-through ``SH/H/M/L`` codes).
utility    : Utility payment propensity (pass-through labels).

Use ``get_profile(slug)`` rather than importing a vertical module directly.
"""

from __future__ import annotations

from propensity_engine.taxonomy.categories import VerticalSlug
from propensity_engine.verticals import healthcare, rpc, utility
from propensity_engine.verticals.profile import VerticalProfile

PROFILES: dict[VerticalSlug, VerticalProfile] = {
    VerticalSlug.HEALTHCARE: healthcare.PROFILE,
    VerticalSlug.RPC: rpc.PROFILE,
    VerticalSlug.UTILITY: utility.PROFILE,
}


def get_profile(slug: str) -> VerticalProfile:
    """Return the profile for ``slug``.

    Raises:
        ValueError: If ``slug`` is not a known vertical.
    """
    try:
        return PROFILES[VerticalSlug(slug)]
    except ValueError:
        raise ValueError(
            f"Unknown vertical '{slug}'. Must be one of {sorted(v.value for v in VerticalSlug)}."
        ) from None
