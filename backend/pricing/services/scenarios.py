from __future__ import annotations

import logging
from typing import Iterable, List

from ..dataclasses import CatalogItem, MarkupPercentages, Scenario, ScenarioResult
from .final_pricing import apply_markup
from .itinerary import expand_itinerary
from .markup_rules import default_markup_for_tier

logger = logging.getLogger(__name__)


def compare_scenarios(scenarios: Iterable[Scenario], catalog: Iterable[CatalogItem]) -> List[ScenarioResult]:
    """
    Price several variants of a trip side by side.

    Each scenario is expanded and marked up on its own; results keep input
    order and report their final total relative to the first scenario.
    """
    catalog_list = list(catalog)
    results: List[ScenarioResult] = []

    for scenario in scenarios:
        markup = scenario.markup
        if markup is None:
            markup = default_markup_for_tier(scenario.trip.tier) if scenario.use_tier_markup else MarkupPercentages()

        pricing = expand_itinerary(scenario.trip, catalog_list)
        final = apply_markup(pricing.totals.grand_total, markup, scenario.trip.travelers)
        results.append(
            ScenarioResult(
                name=scenario.name,
                pricing=pricing,
                final_pricing=final,
                markup=markup,
            )
        )

    if results:
        reference = results[0].final_pricing.final_total
        for result in results:
            result.difference_from_first = result.final_pricing.final_total - reference

    logger.debug(f"Compared {len(results)} scenarios")
    return results
