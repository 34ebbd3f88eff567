"""
Category classifier: raw score or backend code → ``Category``.

Two policies
------------
threshold:
    ``score >= high_threshold   → High``
    ``score >= medium_threshold → Medium``
    otherwise                   → Low
    Defaults 0.085767 / 0.031018 come from ``[classification]`` config.
    Scores outside [0, 1] are still classified; the comparisons are
    order-preserving at the extremes, not bounds checks.

pass-through:
    The backend already classified the account server-side; its code
    (``SH``/``H``/``M``/``L`` or a full label) is mapped to a Category.
    Thresholds are never re-applied to such a backend.

``classify_prediction()`` picks the policy per prediction:
  - a known backend code is always passed through;
  - otherwise a threshold-mode profile classifies the raw score;
  - a pass-through profile with a missing or unknown code yields ``None``
    (the account is treated as unscored).
"""

from __future__ import annotations

import logging
from typing import Optional

from propensity_engine.config import ClassificationConfig
from propensity_engine.models.account import BackendPrediction
from propensity_engine.taxonomy.categories import Category
from propensity_engine.verticals.profile import ClassificationMode, VerticalProfile

logger = logging.getLogger(__name__)


class CategoryClassifier:
    """Classifies backend output for one vertical profile.

    Attributes:
        profile: Vertical profile supplying mode and code table.
        config:  Threshold cut points.
    """

    def __init__(
        self,
        profile: VerticalProfile,
        config: ClassificationConfig | None = None,
    ) -> None:
        self.profile = profile
        self.config = config or ClassificationConfig()

    def classify(self, score: float) -> Category:
        """Threshold policy: classify a raw probability."""
        if score >= self.config.high_threshold:
            return Category.HIGH
        if score >= self.config.medium_threshold:
            return Category.MEDIUM
        return Category.LOW

    def from_code(self, code: str | None) -> Optional[Category]:
        """Pass-through policy: map a backend code to a Category, if known."""
        if code is None:
            return None
        return self.profile.category_codes.get(str(code).strip())

    def classify_prediction(self, prediction: BackendPrediction) -> Optional[Category]:
        """Classify one backend row; ``None`` means the row cannot be classified."""
        category = self.from_code(prediction.category_code)
        if category is not None:
            return category

        if self.profile.classification_mode is ClassificationMode.THRESHOLD:
            if prediction.score is None:
                return None
            return self.classify(prediction.score)

        logger.warning(
            "Account %s: unknown category code %r for %s backend",
            prediction.account_id, prediction.category_code, self.profile.slug,
        )
        return None
