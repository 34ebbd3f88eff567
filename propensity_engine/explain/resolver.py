"""
Feature resolver: maps opaque backend feature names to display labels and
formatted record values.

Backend attribution names are loosely typed (``"INIT BAL"``, ``"Chargeoff_AGE"``,
``"TU Score"``) and differ per vertical.  Each vertical supplies a lookup
table ``{feature name: FeatureSpec(label, field_key)}`` and a value
formatter; ``TableFeatureResolver`` combines them behind the
``FeatureResolver`` capability.

Fallback
--------
A feature missing from the table resolves to its raw name and the
resolver's ``unmapped_value`` (``""`` or the ``—`` placeholder).  A mapped
feature whose record field is absent resolves to ``missing_value``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Protocol

from propensity_engine.explain.formatting import PLACEHOLDER
from propensity_engine.models.account import FeatureRecord

logger = logging.getLogger(__name__)

# (field_key, raw_value, text_budget) -> display string
ValueFormatter = Callable[[str, Any, int], str]


@dataclass(frozen=True)
class FeatureSpec:
    """Display label and source field for one backend feature name."""

    label: str
    field_key: str


class FeatureResolver(Protocol):
    """Capability: resolve one attribution feature against a record."""

    def resolve(self, feature_name: str, record: FeatureRecord) -> tuple[str, str]:
        ...

    def field_key(self, feature_name: str) -> str | None:
        ...


@dataclass(frozen=True)
class TableFeatureResolver:
    """Table-driven ``FeatureResolver`` for one vertical.

    Attributes:
        table:          Backend feature name → ``FeatureSpec``.
        formatter:      Vertical value formatter.
        unmapped_value: Value shown for features absent from ``table``.
        text_truncate:  Character budget for free-text values.
    """

    table: Mapping[str, FeatureSpec]
    formatter: ValueFormatter
    unmapped_value: str = ""
    text_truncate: int = 25
    missing_value: str = PLACEHOLDER

    def field_key(self, feature_name: str) -> str | None:
        spec = self.table.get(feature_name)
        return spec.field_key if spec is not None else None

    def resolve(self, feature_name: str, record: FeatureRecord) -> tuple[str, str]:
        """Return ``(display_label, display_value)`` for ``feature_name``."""
        spec = self.table.get(feature_name)
        if spec is None:
            logger.debug(
                "No display mapping for feature %r (account %s)",
                feature_name, record.account_id,
            )
            return feature_name, self.unmapped_value

        raw = record.get(spec.field_key)
        if raw is None:
            return spec.label, self.missing_value
        return spec.label, self.formatter(spec.field_key, raw, self.text_truncate)

    def with_text_truncate(self, budget: int) -> "TableFeatureResolver":
        return replace(self, text_truncate=budget)
