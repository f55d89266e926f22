"""
Unit estimate enrichment.

External estimators (street-view window detection, AI vision, etc.) may
supply the units for a quote. Their failures never reach the pricing engine:
estimate_units falls back to a default unit count instead.
"""
import logging
from decimal import Decimal
from typing import Any, Callable, Optional

from ..config.settings import get_settings
from ..engine.errors import InvalidUnits, UpstreamEnrichmentFailure
from ..engine.pricing_engine import coerce_units

logger = logging.getLogger(__name__)


def window_count_from_annotations(response: Optional[dict]) -> int:
    """
    Count windows in an image-annotation response.

    Counts localized objects whose name contains "window". When no object
    matches, a "window" label counts as a single window.
    Raises UpstreamEnrichmentFailure when the response carries no annotations.
    """
    results = (response or {}).get("responses") or []
    if not results or not results[0]:
        raise UpstreamEnrichmentFailure("Vision: no responses")
    annotations = results[0]

    count = sum(
        1 for obj in annotations.get("localizedObjectAnnotations") or []
        if "window" in (obj.get("name") or "").lower()
    )

    if count == 0:
        labels = annotations.get("labelAnnotations") or []
        if any("window" in (label.get("description") or "").lower() for label in labels):
            count = 1

    return count


def estimate_units(
    estimator: Callable[..., Any],
    *args,
    default: Optional[Decimal] = None,
    **kwargs,
) -> Decimal:
    """
    Run a unit estimator, falling back to the default unit count.

    The estimate must be usable as quote units (positive, finite, numeric);
    a failing estimator or an unusable estimate yields the default.
    """
    fallback = default if default is not None else get_settings().default_units
    try:
        fallback = coerce_units(fallback)
    except InvalidUnits:
        raise ValueError(f"Default unit count must be a positive number, got {fallback!r}")

    try:
        estimate = estimator(*args, **kwargs)
    except UpstreamEnrichmentFailure as e:
        logger.warning("Unit estimator failed, using default %s units: %s", fallback, e)
        return fallback

    try:
        return coerce_units(estimate)
    except InvalidUnits:
        logger.warning("Unit estimator returned %r, using default %s units", estimate, fallback)
        return fallback
