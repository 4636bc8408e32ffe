"""
Markup defaults for quotations

Loads the default contingency / commission / profit percentages from a JSON
configuration file, validates them, and resolves the percentages that apply
to a trip tier when a quote is priced without explicit markup.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from django.conf import settings

from ..dataclasses import MarkupPercentages
from .exceptions import ConfigurationError, ValidationError
from .utils import ZERO, safe_decimal

logger = logging.getLogger(__name__)

PERCENTAGE_KEYS = ('contingency_pct', 'commission_pct', 'profit_pct')


def _default_config_path() -> Path:
    configured = getattr(settings, 'PRICING_MARKUP_RULES_PATH', None)
    if configured:
        return Path(configured)
    return Path(__file__).parent.parent / "config" / "markup_rules.json"


def load_markup_rules(config_path: str = None) -> dict:
    """
    Load markup rules from JSON configuration file

    Args:
        config_path: Path to the markup rules JSON file. If None, uses
            settings.PRICING_MARKUP_RULES_PATH or the bundled default.

    Returns:
        dict: Parsed markup rules configuration

    Raises:
        ConfigurationError: If file cannot be loaded or parsed
    """
    config_path = Path(config_path) if config_path is not None else _default_config_path()

    if not config_path.exists():
        raise ConfigurationError(f"Markup rules configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            rules = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in markup rules file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading markup rules configuration: {e}")

    if not isinstance(rules, dict):
        raise ConfigurationError(f"Markup rules file must contain a JSON object: {config_path}")

    logger.info(f"Successfully loaded markup rules from {config_path}")
    return rules


def _validate_percentages(block: Any, label: str, required: bool) -> List[str]:
    errors = []
    if not isinstance(block, dict):
        return [f"{label} must be an object"]

    for key in PERCENTAGE_KEYS:
        if key not in block:
            if required:
                errors.append(f"{label} missing required field: {key}")
            continue
        value = safe_decimal(block[key])
        if value is None or not value.is_finite():
            errors.append(f"{label}.{key} must be a number, got {block[key]!r}")
        elif value < ZERO:
            errors.append(f"{label}.{key} must not be negative, got {block[key]!r}")

    unknown = set(block) - set(PERCENTAGE_KEYS)
    for key in sorted(unknown):
        errors.append(f"{label} has unknown field: {key}")
    return errors


def validate_markup_rules(rules: dict) -> List[str]:
    """
    Validate that markup rules are complete and consistent

    Args:
        rules: Markup rules configuration dictionary

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    for key in ('version', 'defaults'):
        if key not in rules:
            errors.append(f"Missing required top-level key: {key}")

    if 'defaults' in rules:
        errors.extend(_validate_percentages(rules['defaults'], 'defaults', required=True))

    tiers = rules.get('tiers', {})
    if not isinstance(tiers, dict):
        errors.append("tiers must be an object keyed by tier name")
    else:
        for tier, override in tiers.items():
            errors.extend(_validate_percentages(override, f"tiers.{tier}", required=False))

    if not errors:
        logger.info("Markup rules validation passed")
    else:
        logger.warning(f"Markup rules validation found {len(errors)} errors")

    return errors


def get_markup_rules() -> dict:
    """Get a cached, validated instance of the markup rules"""
    if not hasattr(get_markup_rules, '_cached_rules'):
        rules = load_markup_rules()

        validation_errors = validate_markup_rules(rules)
        if validation_errors:
            logger.error(f"Markup rules validation failed: {validation_errors}")
            raise ValidationError(f"Markup rules validation failed: {validation_errors}")

        get_markup_rules._cached_rules = rules

    return get_markup_rules._cached_rules


def clear_markup_rules_cache():
    """Clear the cached markup rules (useful for testing or config updates)"""
    if hasattr(get_markup_rules, '_cached_rules'):
        delattr(get_markup_rules, '_cached_rules')


def default_markup_for_tier(tier: Optional[str], rules: Optional[dict] = None) -> MarkupPercentages:
    """
    Percentages for a trip tier: the configured defaults, overlaid field by
    field with the tier's override. Unknown tiers fall back to the defaults.
    """
    if rules is None:
        rules = get_markup_rules()

    merged: Dict[str, Any] = dict(rules.get('defaults') or {})
    overrides = (rules.get('tiers') or {}).get(tier) if tier else None
    if overrides:
        merged.update(overrides)

    values = {}
    for key in PERCENTAGE_KEYS:
        value = safe_decimal(merged.get(key))
        values[key] = value if value is not None and value.is_finite() and value >= ZERO else ZERO
    return MarkupPercentages(**values)
