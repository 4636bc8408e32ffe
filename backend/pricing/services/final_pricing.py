"""
Final client price on top of the catalog total.

Three markups are layered in a fixed order, each on the running subtotal:
  1. contingency (unforeseen costs) on the base total
  2. local agent commission on base + contingency
  3. profit on base + contingency + commission
"""
from __future__ import annotations

from ..dataclasses import FinalPricing, MarkupPercentages
from .utils import HUNDRED, d, per_person


def calculate_final_pricing(
    base_total,
    contingency_pct=0,
    commission_pct=0,
    profit_pct=0,
    travelers: int = 0,
) -> FinalPricing:
    base = d(base_total)

    contingency_amount = base * d(contingency_pct) / HUNDRED
    subtotal_after_contingency = base + contingency_amount

    commission_amount = subtotal_after_contingency * d(commission_pct) / HUNDRED
    subtotal_after_commission = subtotal_after_contingency + commission_amount

    profit_amount = subtotal_after_commission * d(profit_pct) / HUNDRED
    final_total = subtotal_after_commission + profit_amount

    return FinalPricing(
        base_total=base,
        contingency_amount=contingency_amount,
        subtotal_after_contingency=subtotal_after_contingency,
        commission_amount=commission_amount,
        subtotal_after_commission=subtotal_after_commission,
        profit_amount=profit_amount,
        final_total=final_total,
        final_per_person=per_person(final_total, travelers),
    )


def apply_markup(base_total, markup: MarkupPercentages, travelers: int) -> FinalPricing:
    return calculate_final_pricing(
        base_total,
        markup.contingency_pct,
        markup.commission_pct,
        markup.profit_pct,
        travelers,
    )
