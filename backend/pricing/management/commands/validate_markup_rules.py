from django.core.management.base import BaseCommand

from pricing.services.exceptions import ConfigurationError
from pricing.services.markup_rules import (
    PERCENTAGE_KEYS,
    default_markup_for_tier,
    load_markup_rules,
    validate_markup_rules,
)


class Command(BaseCommand):
    help = "Validates the markup rules file and prints the percentages each tier resolves to."

    def add_arguments(self, parser):
        parser.add_argument("--path", help="Markup rules JSON file (defaults to the configured file)")

    def handle(self, *args, **options):
        try:
            rules = load_markup_rules(options.get("path"))
        except ConfigurationError as e:
            self.stdout.write(self.style.ERROR(str(e)))
            return

        errors = validate_markup_rules(rules)
        if errors:
            for error in errors:
                self.stdout.write(f"  - {error}")
            self.stdout.write(self.style.ERROR(f"\nValidation failed with {len(errors)} errors."))
            return

        tiers = ["(defaults)"] + sorted((rules.get("tiers") or {}).keys())
        for tier in tiers:
            markup = default_markup_for_tier(None if tier == "(defaults)" else tier, rules)
            values = ", ".join(f"{key}={getattr(markup, key)}" for key in PERCENTAGE_KEYS)
            self.stdout.write(f"{tier}: {values}")

        self.stdout.write(self.style.SUCCESS(f"\nMarkup rules version {rules.get('version')} look good."))
