import json

from django.core.management.base import BaseCommand, CommandError

from pricing.serializers import QuoteComputeRequestSerializer, TripDraftSerializer, to_catalog
from pricing.services.capacity import validate_trip_capacity
from pricing.services.itinerary import expand_itinerary
from pricing.services.summary import summarize_by_category
from pricing.services.utils import quantize_money


class Command(BaseCommand):
    help = "Prices a trip draft from a JSON file holding {trip, catalog} and prints the breakdown."

    def add_arguments(self, parser):
        parser.add_argument("path", help="JSON document with 'trip' and 'catalog' keys")

    def handle(self, *args, **options):
        try:
            with open(options["path"], "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CommandError(f"Could not read {options['path']}: {e}")

        ser = QuoteComputeRequestSerializer(data=payload)
        if not ser.is_valid():
            raise CommandError(f"Invalid trip document: {json.dumps(ser.errors)}")

        trip = TripDraftSerializer.to_trip(ser.validated_data["trip"])
        catalog = to_catalog(ser.validated_data["catalog"])
        result = expand_itinerary(trip, catalog)

        for line in result.breakdown:
            self.stdout.write(
                f"{line.id:<24} {line.category:<12} {line.item_name:<40} "
                f"{quantize_money(line.calculated_total):>12}  {line.calculation_explanation}"
            )

        self.stdout.write("-" * 20)
        for entry in summarize_by_category(result.breakdown):
            self.stdout.write(f"{entry.category:<12} {quantize_money(entry.subtotal):>12}  {quantize_money(entry.percentage)}%")

        capacity = validate_trip_capacity(trip, catalog)
        for issue in capacity.issues:
            self.stdout.write(self.style.WARNING(f"Capacity: {issue.item_id} seats {issue.capacity} x {issue.quantity} for {issue.travelers} travelers"))

        self.stdout.write(self.style.SUCCESS(
            f"\nTotal {quantize_money(result.totals.grand_total)} "
            f"({quantize_money(result.totals.per_person)} per person, {trip.travelers} travelers)"
        ))
