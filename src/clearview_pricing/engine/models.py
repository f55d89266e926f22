"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Money amounts are Decimal throughout; conversion to float happens at the
transport boundary.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional, Union

ServiceId = Union[int, str]


@dataclass
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class ServiceEntry:
    """A named, priced service offering in the catalog."""
    id: ServiceId
    name: str
    price_per_unit: Decimal
    unit: str = "unit"  # informational only
    category: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "pricePerUnit": float(self.price_per_unit),
            "unitLabel": self.unit,
            "category": self.category,
        }


@dataclass(frozen=True)
class PricingConfig:
    """
    Per-deployment pricing policy.

    minimum_charge is either one amount applied to every service, or a map
    keyed by service id or category slug.
    """
    tax_rate: Decimal = Decimal("0.05")
    buffer_rate: Decimal = Decimal("0")
    minimum_charge: Union[Decimal, Mapping[str, Decimal]] = Decimal("0")

    def minimum_for(self, entry: ServiceEntry) -> Decimal:
        """Resolve the minimum charge for a service: id first, then category."""
        if not isinstance(self.minimum_charge, Mapping):
            return self.minimum_charge

        by_id = self.minimum_charge.get(str(entry.id))
        if by_id is not None:
            return by_id
        if entry.category:
            by_category = self.minimum_charge.get(entry.category)
            if by_category is not None:
                return by_category
        return Decimal("0")


@dataclass
class QuoteRequest:
    """A pricing request as decoded from the transport layer."""
    service_id: ServiceId
    units: object  # validated by compute_quote
    technician_id: Optional[str] = None


@dataclass
class Quote:
    """Complete result of a quote calculation."""
    service_id: ServiceId
    service_name: str
    units: Decimal
    unit: str
    price_per_unit: Decimal
    base: Decimal
    buffer: Decimal
    minimum_applied: bool
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_response_dict(self) -> dict:
        """Convert to the JSON shape served by the quote endpoint."""
        return {
            "serviceId": self.service_id,
            "service": self.service_name,
            "units": float(self.units),
            "unitLabel": self.unit,
            "pricePerUnit": float(self.price_per_unit),
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "total": float(self.total),
            "minimumApplied": self.minimum_applied,
        }
