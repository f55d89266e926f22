"""Engine subpackage - catalog resolution and quote pricing."""
from .pricing_engine import PricingEngine, compute_quote
from .catalog import ServiceCatalog, resolve_service
from .models import ServiceEntry, PricingConfig, QuoteRequest, Quote
from .errors import PricingError, UnknownService, InvalidUnits, CatalogError, UpstreamEnrichmentFailure

__all__ = [
    'PricingEngine', 'compute_quote', 'ServiceCatalog', 'resolve_service',
    'ServiceEntry', 'PricingConfig', 'QuoteRequest', 'Quote',
    'PricingError', 'UnknownService', 'InvalidUnits', 'CatalogError', 'UpstreamEnrichmentFailure',
]
