"""
Explanation output models — presentation-only, recomputed per inspection.

``Decomposition`` is the additive base-value-plus-attributions trace that
justifies a final probability::

    log_odds    == base_value + attribution_sum
    probability == 1 / (1 + exp(-log_odds))

``ResolvedFactor`` is one attribution after its backend feature name has been
resolved to a display label and formatted record value.

``FactorPanel`` is the two-column "top factors" selection for one category.

``Explanation`` bundles all of the above for a single scored account.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from propensity_engine.taxonomy.categories import Category


class Decomposition(BaseModel):
    """Base value + attribution sum → log-odds → probability.

    Values are kept at full precision; ``rounded()`` returns the three-decimal
    trace shown to operators.
    """

    model_config = ConfigDict(frozen=True)

    base_value: float
    attribution_sum: float
    log_odds: float
    probability: float

    def rounded(self, digits: int = 3) -> dict[str, float]:
        """Display trace: base value, sum and log-odds rounded to ``digits``."""
        return {
            "base_value": round(self.base_value, digits),
            "attribution_sum": round(self.attribution_sum, digits),
            "log_odds": round(self.log_odds, digits),
            "probability": self.probability,
        }


class ResolvedFactor(BaseModel):
    """One attribution resolved for display."""

    model_config = ConfigDict(frozen=True)

    name: str
    impact: float
    value: str

    @property
    def is_positive(self) -> bool:
        """Non-negative impacts push toward the favourable outcome."""
        return self.impact >= 0


class FactorPanel(BaseModel):
    """Top-factor columns chosen for one category."""

    model_config = ConfigDict(frozen=True)

    title: str
    left: tuple[ResolvedFactor, ...] = ()
    right: tuple[ResolvedFactor, ...] = ()

    @property
    def factors(self) -> tuple[ResolvedFactor, ...]:
        return self.left + self.right


class Explanation(BaseModel):
    """Everything needed to show why one account received its score.

    Attributes:
        account_id: Identifier of the explained account.
        category: Its classified category.
        probability: Unclamped model probability — the value shown outside
            the decomposition trace.
        factors: Resolved attributions in display order.
        decomposition: Arithmetic trace over ``factors``.
        panel: Category-specific top-factor selection.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str
    category: Category
    probability: float
    factors: tuple[ResolvedFactor, ...]
    decomposition: Decomposition
    panel: FactorPanel
