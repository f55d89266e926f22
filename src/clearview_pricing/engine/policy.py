"""
Pricing policy loader.

Reads the per-deployment PricingConfig (tax, buffer, minimum charges) from a
JSON file. A missing file falls back to the default policy.
"""
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping, Optional

from .errors import CatalogError
from .models import PricingConfig

logger = logging.getLogger(__name__)


def _to_decimal(value, name: str) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise CatalogError(f"Policy value {name}={value!r} is not a number")
    if not amount.is_finite():
        raise CatalogError(f"Policy value {name}={value!r} is not finite")
    return amount


def build_pricing_config(
    tax_rate=None,
    buffer_rate=None,
    minimum_charge=None,
) -> PricingConfig:
    """Validate raw policy values and build a PricingConfig."""
    defaults = PricingConfig()

    tax = defaults.tax_rate if tax_rate is None else _to_decimal(tax_rate, "tax_rate")
    if not Decimal("0") <= tax <= Decimal("1"):
        raise CatalogError(f"tax_rate must be between 0 and 1, got {tax}")

    buffer = defaults.buffer_rate if buffer_rate is None else _to_decimal(buffer_rate, "buffer_rate")
    if not Decimal("0") <= buffer < Decimal("1"):
        raise CatalogError(f"buffer_rate must be in [0, 1), got {buffer}")

    if minimum_charge is None:
        minimum = defaults.minimum_charge
    elif isinstance(minimum_charge, Mapping):
        minimum = {
            str(key).strip(): _to_decimal(value, f"minimum_charge[{key}]")
            for key, value in minimum_charge.items()
        }
        if any(v < 0 for v in minimum.values()):
            raise CatalogError("minimum_charge amounts must be non-negative")
    else:
        minimum = _to_decimal(minimum_charge, "minimum_charge")
        if minimum < 0:
            raise CatalogError("minimum_charge must be non-negative")

    return PricingConfig(tax_rate=tax, buffer_rate=buffer, minimum_charge=minimum)


def load_pricing_config(
    path: Optional[Path],
    tax_rate_override=None,
    buffer_rate_override=None,
) -> PricingConfig:
    """
    Load the pricing policy from JSON.

    Overrides (typically from environment variables) win over file values.
    """
    data = {}
    if path and path.exists():
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Loaded pricing policy from %s", path)
    else:
        logger.warning("Pricing policy not found at %s, using defaults", path)

    config = build_pricing_config(
        tax_rate=tax_rate_override if tax_rate_override is not None else data.get("tax_rate"),
        buffer_rate=buffer_rate_override if buffer_rate_override is not None else data.get("buffer_rate"),
        minimum_charge=data.get("minimum_charge"),
    )
    return config
