"""
Account-level domain models.

``FeatureRecord`` is one vertical-specific input row (an account as fetched
from the backend's generate endpoint or loaded from a file).

``Attribution`` is one model input's signed contribution to the final score.

``BackendPrediction`` is one parsed row of a batch-score response, before
classification.

``ScoredResult`` couples a ``FeatureRecord`` with its classified output.

All models are frozen — an edit replaces whole fields through
``FeatureRecord.replace_fields()``, and a new scoring call supersedes every
``ScoredResult`` wholesale.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from propensity_engine.taxonomy.categories import Category, PriorityBand, VerticalSlug


class FeatureRecord(BaseModel):
    """One account's input fields for a single vertical.

    Attributes:
        vertical: Vertical whose schema ``fields`` follows.
        account_id: Stable unique identifier (FACS number, AcctID, acct_id),
            normalised to ``str`` at the backend boundary.
        fields: Internal field key → scalar value (number, code string,
            0/1 flag, or ISO date string).
    """

    model_config = ConfigDict(frozen=True)

    vertical: VerticalSlug
    account_id: str
    fields: dict[str, Any]

    @field_validator("account_id", mode="before")
    @classmethod
    def normalize_account_id(cls, v: Any) -> str:
        if v is None or str(v).strip() == "":
            raise ValueError("account_id must not be empty.")
        return str(v).strip()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the raw value of ``key``, or ``default`` when absent."""
        return self.fields.get(key, default)

    def replace_fields(self, **updates: Any) -> "FeatureRecord":
        """Return a copy with whole-field replacements applied."""
        return self.model_copy(update={"fields": {**self.fields, **updates}})


class Attribution(BaseModel):
    """Signed contribution of one feature to the model's log-odds output.

    Attributes:
        feature: Opaque backend feature name (e.g. ``"INIT BAL"``).
        impact: Signed, unbounded contribution.
        field_key: Record field that holds the underlying raw value, or
            ``None`` when the vertical's table has no mapping.
    """

    model_config = ConfigDict(frozen=True)

    feature: str
    impact: float
    field_key: Optional[str] = None


class BackendPrediction(BaseModel):
    """One parsed batch-score response row.

    ``score`` is a probability in [0, 1] (percent strings are converted at
    parse time). ``attributions`` is ``None`` when the backend omitted them,
    which makes the row unusable; an empty tuple is a valid response.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str
    score: Optional[float] = None
    category_code: Optional[str] = None
    amount_predicted: Optional[float] = None
    attributions: Optional[tuple[Attribution, ...]] = None
    scoring_date: Optional[str] = None

    @field_validator("account_id", mode="before")
    @classmethod
    def normalize_account_id(cls, v: Any) -> str:
        return str(v).strip()

    @property
    def is_complete(self) -> bool:
        """True when the row carries both a score and an attribution list."""
        return self.score is not None and self.attributions is not None


class ScoredResult(BaseModel):
    """A Feature Record merged with its classified backend output.

    Attributes:
        record: The source record; the result's identifier is always its
            ``account_id``.
        score: Model probability in [0, 1] (unclamped).
        category: Classified outcome label.
        priority: Category-scoped band; ``None`` until tiering has run.
        amount_predicted: Predicted recoverable amount, when the vertical
            provides one.
        attributions: Immutable per-feature contributions.
        scoring_date: Backend scoring date, when provided.
    """

    model_config = ConfigDict(frozen=True)

    record: FeatureRecord
    score: float
    category: Category
    priority: Optional[PriorityBand] = None
    amount_predicted: Optional[float] = None
    attributions: tuple[Attribution, ...] = ()
    scoring_date: Optional[str] = None

    @model_validator(mode="after")
    def validate_priority_scope(self) -> "ScoredResult":
        if self.priority is not None and self.priority.category != self.category:
            raise ValueError(
                f"priority {self.priority} does not belong to category {self.category}."
            )
        return self

    @property
    def account_id(self) -> str:
        return self.record.account_id

    @property
    def score_percent(self) -> float:
        return self.score * 100.0
