"""
ASCII terminal formatters for the ``score`` command.

All formatters accept engine models and return plain multi-line strings
suitable for ``typer.echo()``.

Ranked table
------------
One row per scored account in ranking order, followed by the vertical's
own input columns and the tiering magnitude::

    Rank  Account     Category    Band  Score    Financial Class  ...  Tier Value
    -----------------------------------------------------------------------------
       1  32552411    High        H1    14.36%   COMMERCIAL       ...       1,652

Accounts that were selected but came back without a usable result are
listed underneath, so nothing silently disappears from the report.
"""

from __future__ import annotations

from propensity_engine.explain.formatting import format_grouped, to_fixed
from propensity_engine.models.account import ScoredResult
from propensity_engine.models.explanation import Explanation, ResolvedFactor
from propensity_engine.verticals.profile import VerticalProfile

_COL_WIDTH = 16


def format_percent(probability: float, digits: int = 2) -> str:
    """``0.1436 -> "14.36%"``."""
    return f"{to_fixed(probability * 100, digits)}%"


def format_impact(impact: float) -> str:
    text = to_fixed(impact, 3)
    return text if text.startswith("-") else f"+{text}"


# ── Ranked table ──────────────────────────────────────────────────────────────


def format_ranked_table(
    ranked: list[ScoredResult],
    profile: VerticalProfile,
    unscored_ids: list[str] | None = None,
) -> str:
    """Format ranked results for one vertical as an ASCII table.

    Args:
        ranked:       Results already in ranking order.
        profile:      Vertical profile (column set and value formatting).
        unscored_ids: Selected accounts without a usable result.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {profile.display_name}: Ranked Results ===")
    lines.append(f"  Vertical: {profile.slug}")
    lines.append(f"  Scored:   {len(ranked)}")

    if not ranked:
        lines.append("")
        lines.append("  (no scored accounts)")
    else:
        extra_headers = "".join(f"  {label[:_COL_WIDTH]:<{_COL_WIDTH}}" for _, label in profile.columns)
        header = (
            f"  {'Rank':>4}  {'Account':<12}  {'Category':<10}  {'Band':<4}  "
            f"{'Score':>8}{extra_headers}  {'Tier Value':>12}"
        )
        lines.append("")
        lines.append(header)
        lines.append("  " + "-" * (len(header) - 2))

        formatter = profile.resolver.formatter
        truncate = profile.resolver.text_truncate
        for rank, row in enumerate(ranked, start=1):
            extras = ""
            for key, _ in profile.columns:
                raw = row.record.get(key)
                value = formatter(key, raw, truncate) if raw is not None else "-"
                extras += f"  {value[:_COL_WIDTH]:<{_COL_WIDTH}}"
            band = row.priority.value if row.priority is not None else "-"
            tier_value = format_grouped(profile.secondary_value(row), 0, 2)
            lines.append(
                f"  {rank:>4}  {row.account_id[:12]:<12}  {row.category.value:<10}  {band:<4}  "
                f"{format_percent(row.score):>8}{extras}  {tier_value:>12}"
            )

    if unscored_ids:
        lines.append("")
        lines.append(f"  Unscored ({len(unscored_ids)}): {', '.join(unscored_ids)}")

    return "\n".join(lines)


# ── Explanation ───────────────────────────────────────────────────────────────


def _factor_line(factor: ResolvedFactor, name_width: int = 28) -> str:
    return f"{factor.name[:name_width]:<{name_width}}  {factor.value[:20]:<20}  {format_impact(factor.impact):>8}"


def format_explanation(explanation: Explanation) -> str:
    """Format one account's explanation: top factors, all factors, trace.

    The probability in the header is the unclamped model output; the
    trace's final probability is the clamped one it was solved for.
    """
    trace = explanation.decomposition
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Explanation: account {explanation.account_id} ===")
    lines.append(f"  Category:    {explanation.category.value}")
    lines.append(f"  Probability: {format_percent(explanation.probability)}")

    panel = explanation.panel
    lines.append("")
    lines.append(f"  [{panel.title}]")
    if not panel.factors:
        lines.append("    (none)")
    for i in range(max(len(panel.left), len(panel.right))):
        left = f"{panel.left[i].name} ({format_impact(panel.left[i].impact)})" if i < len(panel.left) else ""
        right = f"{panel.right[i].name} ({format_impact(panel.right[i].impact)})" if i < len(panel.right) else ""
        lines.append(f"    {left:<40}  {right}")

    lines.append("")
    lines.append("  All factors")
    header = f"    {'Feature':<28}  {'Value':<20}  {'Impact':>8}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for factor in explanation.factors:
        lines.append(f"    {_factor_line(factor)}")

    lines.append("")
    lines.append("  Probability formula")
    lines.append(f"    base value      {to_fixed(trace.base_value, 3):>10}")
    lines.append(f"    + attributions  {to_fixed(trace.attribution_sum, 3):>10}")
    lines.append(f"    = log-odds      {to_fixed(trace.log_odds, 3):>10}")
    lines.append(f"    sigmoid         {format_percent(trace.probability):>10}")
    return "\n".join(lines)
