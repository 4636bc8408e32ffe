from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List

from ..dataclasses import BreakdownLine, CategorySubtotal
from .utils import HUNDRED, ZERO, d


def summarize_by_category(breakdown: Iterable[BreakdownLine]) -> List[CategorySubtotal]:
    """
    Group breakdown lines into category subtotals, largest first.

    Each entry carries its share of the grand total and the running
    cumulative share, which is what a pareto view of the quote needs.
    """
    subtotals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for line in breakdown:
        subtotals[line.category] = subtotals.get(line.category, ZERO) + d(line.calculated_total)
        counts[line.category] = counts.get(line.category, 0) + 1

    grand_total = sum(subtotals.values(), ZERO)
    # sorted() is stable, so equal subtotals keep first-seen order
    ordered = sorted(subtotals.items(), key=lambda kv: kv[1], reverse=True)

    summary: List[CategorySubtotal] = []
    cumulative = ZERO
    for category, subtotal in ordered:
        percentage = subtotal / grand_total * HUNDRED if grand_total > ZERO else ZERO
        cumulative += percentage
        summary.append(
            CategorySubtotal(
                category=category,
                subtotal=subtotal,
                line_count=counts[category],
                percentage=percentage,
                cumulative_percentage=cumulative,
            )
        )
    return summary


def top_cost_drivers(summary: List[CategorySubtotal], threshold=80) -> List[CategorySubtotal]:
    """Categories whose cumulative share stays within the threshold; never empty for a non-empty summary."""
    limit = d(threshold)
    drivers = [entry for entry in summary if entry.cumulative_percentage <= limit]
    if not drivers and summary:
        drivers = summary[:1]
    return drivers
