"""
Vertical profile: everything that differs between the three verticals,
injected into the otherwise generic engine.

A profile bundles
  - the identifier field and wire ↔ internal key conversion,
  - the classification mode and backend category-code table,
  - the secondary magnitude used for priority tiering,
  - the feature resolver (label table + value formatter),
  - the backend endpoint prefix,
  - the accepted range of each editable numeric field.

Engine components take a ``VerticalProfile`` argument instead of branching
on the vertical name.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Mapping, NamedTuple, Optional

from propensity_engine.explain.resolver import TableFeatureResolver
from propensity_engine.models.account import (
    Attribution,
    BackendPrediction,
    FeatureRecord,
    ScoredResult,
)
from propensity_engine.taxonomy.categories import Category, VerticalSlug

logger = logging.getLogger(__name__)


class ClassificationMode(StrEnum):
    """How a vertical's backend output becomes a Category."""

    THRESHOLD = "threshold"
    """Backend may return only a raw score; fixed cut points classify it."""

    PASSTHROUGH = "passthrough"
    """Backend classifies server-side; its code is mapped to a label."""


class FieldRange(NamedTuple):
    """Inclusive accepted range for one numeric record field."""

    label: str
    min: float
    max: float

    def accepts(self, value: Any) -> bool:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return False
        return not math.isnan(number) and self.min <= number <= self.max


@dataclass(frozen=True)
class VerticalProfile:
    """Per-vertical configuration for the scoring engine.

    Attributes:
        slug:                Vertical identifier.
        display_name:        Human-readable vertical name.
        id_field:            Internal record field holding the identifier.
        classification_mode: Threshold or pass-through classification.
        category_codes:      Backend category code → Category.
        endpoint_prefix:     Backend path prefix (``/generate``, ``/predict``).
        resolver:            Feature label/value resolver.
        truncate_features:   Keep only the largest attributions for display.
        columns:             ``(field_key, label)`` pairs for report tables.
        secondary_value:     Tiering magnitude for a scored result.
        to_wire:             Internal record → backend request row.
        from_wire:           Backend generate row → internal record.
        parse_prediction:    Backend predict row → ``BackendPrediction``.
        response_id_field:   Identifier key in backend predict rows.
        field_ranges:        Field key → accepted ``FieldRange``, checked on commit.
    """

    slug: VerticalSlug
    display_name: str
    id_field: str
    classification_mode: ClassificationMode
    category_codes: Mapping[str, Category]
    endpoint_prefix: str
    resolver: TableFeatureResolver
    truncate_features: bool
    columns: tuple[tuple[str, str], ...]
    secondary_value: Callable[[ScoredResult], float]
    to_wire: Callable[[FeatureRecord], dict[str, Any]]
    from_wire: Callable[[Mapping[str, Any]], FeatureRecord]
    parse_prediction: Callable[[Mapping[str, Any]], BackendPrediction]
    response_id_field: str
    field_ranges: Mapping[str, FieldRange] = field(default_factory=dict)

    def build_record(self, fields: Mapping[str, Any]) -> FeatureRecord:
        """Build a record from internal-keyed ``fields`` (file input path)."""
        return FeatureRecord(
            vertical=self.slug,
            account_id=fields.get(self.id_field),
            fields=dict(fields),
        )

    def check_ranges(self, record: FeatureRecord) -> None:
        """Raise ``ValueError`` for the first ranged field outside its bounds.

        Fields absent from the record are not checked.  A present value that
        is not a number (empty string, text, NaN) is out of range.
        """
        for key, rng in self.field_ranges.items():
            if key not in record.fields:
                continue
            if not rng.accepts(record.fields[key]):
                raise ValueError(
                    f"\"{rng.label}\" for account {record.account_id} must be between "
                    f"{rng.min:g} and {rng.max:g} (got {record.fields[key]!r})."
                )


# ── Parsing helpers shared by the vertical modules ────────────────────────────


def parse_percent(value: Any) -> Optional[float]:
    """Parse ``"14.36%"`` (or ``14.36``) into a probability (``0.1436``).

    Returns ``None`` when the value is missing or unparseable.
    """
    if value is None:
        return None
    text = str(value).strip().replace("%", "")
    try:
        return float(text) / 100.0
    except ValueError:
        logger.warning("Unparseable percentage value %r", value)
        return None


def parse_float(value: Any) -> Optional[float]:
    """Parse a plain number; ``None`` when missing or unparseable."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Unparseable numeric value %r", value)
        return None


def parse_money(value: Any) -> Optional[float]:
    """Parse ``"$1,652"`` into ``1652.0``."""
    if value is None:
        return None
    text = str(value).replace("$", "").replace(",", "").strip()
    try:
        return float(text)
    except ValueError:
        logger.warning("Unparseable money value %r", value)
        return None


def parse_attributions(
    raw: Any,
    resolver: TableFeatureResolver,
) -> Optional[tuple[Attribution, ...]]:
    """Parse a ``shap_values`` list into ``Attribution`` tuples.

    Entries without a feature name or with a non-numeric impact are dropped
    with a warning.  Returns ``None`` when the list itself is missing or is
    not a list, which leaves the account unscored.
    """
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("Ignoring non-list shap_values %r", raw)
        return None
    attributions: list[Attribution] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            logger.warning("Skipping malformed attribution entry %r", entry)
            continue
        feature = entry.get("feature")
        impact = parse_float(entry.get("impact"))
        if not feature or impact is None:
            logger.warning("Skipping malformed attribution entry %r", entry)
            continue
        attributions.append(
            Attribution(
                feature=str(feature),
                impact=impact,
                field_key=resolver.field_key(str(feature)),
            )
        )
    return tuple(attributions)


def secondary_from_field(result: ScoredResult, field_key: str) -> float:
    """Read a numeric record field as a tiering magnitude (``0.0`` if absent)."""
    value = parse_float(result.record.get(field_key))
    return value if value is not None else 0.0
