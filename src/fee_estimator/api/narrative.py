"""Narrative generator — plain-English interpretation of fee estimates.

Converts a ``FeeReport`` into structured text that explains the monthly
cost, where it comes from, and what could bring it down.
"""

from __future__ import annotations

from fee_estimator.analysis.compare import MixComparison
from fee_estimator.models.results import FeeReport


def generate_narrative(report: FeeReport) -> str:
    """Generate a plain-English narrative from a fee report.

    Returns a structured text block covering:
      1. Headline cost
      2. Top fee drivers
      3. Stablecoin comparison
      4. Savings opportunities
    """
    sections: list[str] = []

    # ── 1. Headline ──
    sections.append("=" * 60)
    sections.append("MONTHLY FEE ESTIMATE")
    sections.append("=" * 60)
    sections.append(
        f"Total fees: ${report.total_fees:,.2f} on {report.transaction_count:,} transactions "
        f"(effective rate {report.effective_rate_percent:.3f}%)."
    )
    sections.append(f"Net revenue after fees: ${report.net_revenue:,.2f}.")

    # ── 2. Drivers ──
    if report.breakdown:
        sections.append("")
        sections.append("TOP FEE DRIVERS")
        ranked = sorted(report.breakdown.items(), key=lambda kv: kv[1], reverse=True)
        for category, amount in ranked[:3]:
            share = amount / report.total_fees * 100 if report.total_fees > 0 else 0.0
            sections.append(f"  - {category.label}: ${amount:,.2f} ({share:.1f}% of fees)")
    else:
        sections.append("No fees apply at this volume.")

    # ── 3. Stablecoins ──
    if report.stablecoin_savings > 0:
        sections.append("")
        sections.append(
            f"Stablecoin settlement costs ${report.stablecoin_savings:,.2f} less per month "
            f"than the same volume on domestic cards."
        )

    # ── 4. Opportunities ──
    if report.savings_opportunities:
        sections.append("")
        sections.append("SAVINGS OPPORTUNITIES")
        for opp in report.savings_opportunities:
            sections.append(f"  - {opp.message}")

    return "\n".join(sections)


def generate_comparison_narrative(comparisons: list[MixComparison]) -> str:
    """Summarise a mix comparison; ``comparisons`` is cheapest first."""
    if not comparisons:
        return "No mixes to compare."

    best = comparisons[0]
    lines = [f"Cheapest mix: '{best.name}' at {best.effective_rate_percent:.3f}% "
             f"(${best.total_fees:,.2f}/month)."]
    for other in comparisons[1:]:
        extra = other.total_fees - best.total_fees
        lines.append(
            f"'{other.name}': {other.effective_rate_percent:.3f}% "
            f"(${other.total_fees:,.2f}/month, ${extra:,.2f} more)."
        )
    return "\n".join(lines)
