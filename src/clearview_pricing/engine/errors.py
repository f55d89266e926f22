"""
Error taxonomy for the pricing engine.

UnknownService and InvalidUnits are per-request client errors.
CatalogError is raised while loading configuration and stops startup.
UpstreamEnrichmentFailure belongs to unit estimators and never reaches pricing.
"""


class PricingError(Exception):
    """Base class for recoverable, per-request pricing errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownService(PricingError):
    """No catalog entry matches the requested service id."""

    def __init__(self, service_id):
        super().__init__(f"Invalid service: {service_id!r} is not in the catalog")
        self.service_id = service_id


class InvalidUnits(PricingError):
    """Units are missing, non-numeric, non-finite, zero, or negative."""

    def __init__(self, units):
        super().__init__("Units/hours must be a positive number")
        self.units = units


class CatalogError(ValueError):
    """The catalog or pricing policy source is malformed."""


class UpstreamEnrichmentFailure(Exception):
    """An external unit estimator failed or returned nothing usable."""
