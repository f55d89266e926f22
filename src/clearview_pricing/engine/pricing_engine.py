"""
Pricing Engine - core quote computation with traceability.

Resolution order for a quote:
1. Resolve the service from the catalog
2. Validate units (positive, finite, numeric)
3. base = price_per_unit * units
4. Apply buffer surcharge
5. Clamp to the service's minimum charge
6. Tax and total, rounded half-up to cents
"""
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

from ..config.settings import Settings, get_settings
from .catalog import ServiceCatalog, resolve_service
from .errors import InvalidUnits
from .models import PricingConfig, Quote, QuoteRequest, ServiceEntry, ServiceId
from .policy import load_pricing_config

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# No job bills a trillion windows, hours or square feet
MAX_UNITS = Decimal("1e12")


def round2(amount: Decimal) -> Decimal:
    """Round half-up to 2 decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def coerce_units(units) -> Decimal:
    """
    Coerce a raw units value to a positive finite Decimal.

    Raises InvalidUnits for None, booleans, non-numeric strings, NaN,
    infinities, zero, negatives and quantities above MAX_UNITS.
    """
    if units is None or isinstance(units, bool):
        raise InvalidUnits(units)
    try:
        if isinstance(units, Decimal):
            value = units
        elif isinstance(units, (int, float)):
            value = Decimal(str(units))
        else:
            value = Decimal(str(units).strip())
    except (InvalidOperation, ValueError):
        raise InvalidUnits(units)

    if not value.is_finite() or value <= 0 or value > MAX_UNITS:
        raise InvalidUnits(units)
    return value


def _working_precision(*amounts: Decimal) -> int:
    """Digits needed to multiply, add and quantize the amounts without rounding."""
    digits = 0
    for amount in amounts:
        sign, coefficient, exponent = amount.as_tuple()
        digits += len(coefficient) + max(exponent, 0) + 2
    return max(28, digits + 10)


def compute_quote(entry: ServiceEntry, units, config: PricingConfig) -> Quote:
    """
    Compute a quote for a resolved catalog entry.

    Pure function of its inputs: repeated calls return equal quotes.
    """
    qty = coerce_units(units)
    minimum = config.minimum_for(entry)

    precision = _working_precision(
        entry.price_per_unit, qty, config.buffer_rate, config.tax_rate, minimum,
    )
    with localcontext() as ctx:
        ctx.prec = precision

        base = entry.price_per_unit * qty
        buffer = base * config.buffer_rate
        adjusted = base + buffer

        minimum_applied = adjusted < minimum
        subtotal = round2(minimum if minimum_applied else adjusted)

        tax = round2(subtotal * config.tax_rate)
        total = round2(subtotal + tax)

    quote = Quote(
        service_id=entry.id,
        service_name=entry.name,
        units=qty,
        unit=entry.unit,
        price_per_unit=entry.price_per_unit,
        base=base,
        buffer=buffer,
        minimum_applied=minimum_applied,
        subtotal=subtotal,
        tax=tax,
        total=total,
    )

    quote.add_trace("Service Lookup", "Found service in catalog", f"{entry.id} ({entry.name})")
    quote.add_trace("Extension", f"{qty} {entry.unit} × ${entry.price_per_unit:.2f}", f"${base:.2f}")
    if config.buffer_rate:
        quote.add_trace("Buffer", f"{config.buffer_rate * 100:.1f}% surcharge", f"${adjusted:.2f}")
    if minimum_applied:
        quote.add_trace("Minimum Charge", f"Raised ${adjusted:.2f} to minimum", f"${minimum:.2f}")
    elif minimum:
        quote.add_trace("Minimum Charge", f"Minimum ${minimum:.2f} not applied (already above)")
    quote.add_trace("Tax", f"{config.tax_rate * 100:.1f}% of ${subtotal:.2f}", f"${tax:.2f}")
    quote.add_trace("Total", "Subtotal + tax", f"${total:.2f}")

    return quote


class PricingEngine:
    """
    Quote engine bound to an injected catalog and pricing policy.

    When catalog or config are omitted they are loaded from the paths in
    Settings (packaged services.csv and pricing_policy.json by default).
    """

    def __init__(
        self,
        catalog: Optional[ServiceCatalog] = None,
        config: Optional[PricingConfig] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()

        if catalog is None:
            catalog = ServiceCatalog.from_csv(self.settings.catalog_csv)
        if config is None:
            config = load_pricing_config(
                self.settings.policy_json,
                tax_rate_override=self.settings.tax_rate_override,
                buffer_rate_override=self.settings.buffer_rate_override,
            )
        self.catalog = catalog
        self.config = config

    def list_services(self) -> list[ServiceEntry]:
        return list(self.catalog)

    def resolve_service(self, service_id: ServiceId) -> ServiceEntry:
        return resolve_service(self.catalog, service_id)

    def quote(self, service_id: ServiceId, units) -> Quote:
        """Resolve the service and compute its quote."""
        entry = self.resolve_service(service_id)
        return compute_quote(entry, units, self.config)

    def calculate(self, request: QuoteRequest) -> Quote:
        """Calculate a quote from a decoded QuoteRequest."""
        quote = self.quote(request.service_id, request.units)
        logger.debug("Quoted service %s x %s = %s", quote.service_id, quote.units, quote.total)
        return quote
