from __future__ import annotations

import logging

from rest_framework import status, views
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .dataclasses import MarkupPercentages
from .serializers import (
    CapacityValidateRequestSerializer,
    CapacityValidationResultSerializer,
    CategorySubtotalSerializer,
    FinalPricingRequestSerializer,
    FinalPricingSerializer,
    MarkupOutputSerializer,
    MarkupSerializer,
    PricingResultSerializer,
    QuoteComputeRequestSerializer,
    ScenarioCompareRequestSerializer,
    ScenarioResultSerializer,
    TripDraftSerializer,
    to_catalog,
)
from .services.capacity import validate_trip_capacity
from .services.exceptions import ConfigurationError, ValidationError
from .services.final_pricing import apply_markup, calculate_final_pricing
from .services.itinerary import expand_itinerary
from .services.markup_rules import default_markup_for_tier
from .services.scenarios import compare_scenarios
from .services.summary import summarize_by_category, top_cost_drivers

logger = logging.getLogger(__name__)


def _markup_unavailable(e: Exception) -> Response:
    logger.error(f"Markup defaults unavailable: {e}")
    return Response({"detail": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class QuoteComputeView(views.APIView):
    """Price a trip draft: breakdown, category summary, capacity findings and final price."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = QuoteComputeRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        trip = TripDraftSerializer.to_trip(data["trip"])
        catalog = to_catalog(data["catalog"])

        try:
            if data.get("markup"):
                markup = MarkupSerializer.to_markup(data["markup"])
            elif data.get("use_tier_markup"):
                markup = default_markup_for_tier(trip.tier)
            else:
                markup = MarkupPercentages()
        except (ConfigurationError, ValidationError) as e:
            return _markup_unavailable(e)

        pricing = expand_itinerary(trip, catalog)
        summary = summarize_by_category(pricing.breakdown)
        capacity = validate_trip_capacity(trip, catalog)
        final = apply_markup(pricing.totals.grand_total, markup, trip.travelers)

        logger.info(
            f"Priced trip '{trip.name}' ({len(pricing.breakdown)} lines): "
            f"base {pricing.totals.grand_total}, final {final.final_total}"
        )

        response_data = {
            **PricingResultSerializer(pricing).data,
            "categories": CategorySubtotalSerializer(summary, many=True).data,
            "topCostDrivers": [entry.category for entry in top_cost_drivers(summary)],
            "capacity": CapacityValidationResultSerializer(capacity).data,
            "markup": MarkupOutputSerializer(markup).data,
            "finalPricing": FinalPricingSerializer(final).data,
        }
        return Response(response_data, status=status.HTTP_200_OK)


class CapacityValidateView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        ser = CapacityValidateRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        result = validate_trip_capacity(
            TripDraftSerializer.to_trip(data["trip"]),
            to_catalog(data["catalog"]),
        )
        return Response(CapacityValidationResultSerializer(result).data, status=status.HTTP_200_OK)


class ScenarioCompareView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        ser = ScenarioCompareRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        scenarios = ScenarioCompareRequestSerializer.to_scenarios(data["scenarios"])
        try:
            results = compare_scenarios(scenarios, to_catalog(data["catalog"]))
        except (ConfigurationError, ValidationError) as e:
            return _markup_unavailable(e)

        return Response(
            {"results": ScenarioResultSerializer(results, many=True).data},
            status=status.HTTP_200_OK,
        )


class FinalPricingView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        ser = FinalPricingRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        final = calculate_final_pricing(
            data["base_total"],
            data["contingency_pct"],
            data["commission_pct"],
            data["profit_pct"],
            data["travelers"],
        )
        return Response(FinalPricingSerializer(final).data, status=status.HTTP_200_OK)
