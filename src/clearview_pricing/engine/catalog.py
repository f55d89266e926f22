"""
Service catalog - the static, read-only list of priced services.

The catalog is loaded once at startup (from CSV, or built in code for tests)
and injected into the engine. There is no create/update/delete.
"""
import logging
import math
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Iterator, Optional

import pandas as pd

from .errors import CatalogError, UnknownService
from .models import ServiceEntry, ServiceId

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "name", "price_per_unit")
MAX_ID_DIGITS = 18


def normalize_service_id(service_id) -> Optional[str]:
    """
    Normalize a service id to its lookup key.

    Integers and integral numeric strings share a key ("2", "2.0" and 2
    all become "2"). Other strings are slugs, compared exactly.
    Returns None for values that can never identify a service.
    """
    if service_id is None or isinstance(service_id, bool):
        return None
    if isinstance(service_id, int):
        return str(service_id)
    if isinstance(service_id, float):
        if not math.isfinite(service_id) or not service_id.is_integer():
            return None
        return str(int(service_id))
    key = str(service_id).strip()
    if not key:
        return None
    try:
        number = Decimal(key)
    except InvalidOperation:
        return key
    # "2", "2.0" and "2e0" all name service 2
    if number.is_finite() and number.adjusted() < MAX_ID_DIGITS and number == number.to_integral_value():
        return str(int(number))
    return key


class ServiceCatalog:
    """Ordered, immutable sequence of ServiceEntry records."""

    def __init__(self, entries: Iterable[ServiceEntry]):
        self._entries = tuple(entries)
        self._index = {}
        for entry in self._entries:
            key = normalize_service_id(entry.id)
            if key is None:
                raise CatalogError(f"Catalog entry {entry.name!r} has no usable id")
            if key in self._index:
                raise CatalogError(f"Duplicate service id in catalog: {entry.id!r}")
            if not entry.price_per_unit.is_finite():
                raise CatalogError(f"Non-finite price for service {entry.id!r}")
            if entry.price_per_unit < 0:
                raise CatalogError(f"Negative price for service {entry.id!r}")
            self._index[key] = entry

    def __iter__(self) -> Iterator[ServiceEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[ServiceEntry, ...]:
        return self._entries

    def get(self, service_id) -> Optional[ServiceEntry]:
        key = normalize_service_id(service_id)
        if key is None:
            return None
        return self._index.get(key)

    def to_records(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_csv(cls, path: Path) -> "ServiceCatalog":
        """Load the catalog from a CSV with id,name,price_per_unit[,unit,category]."""
        if not path.exists():
            raise FileNotFoundError(f"Service catalog not found at {path}.")

        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        df.columns = [c.strip() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise CatalogError(f"Catalog {path.name} is missing columns: {', '.join(missing)}")

        entries = []
        for row in df.to_dict(orient="records"):
            raw_id = row["id"].strip()
            try:
                price = Decimal(row["price_per_unit"].strip())
            except InvalidOperation:
                raise CatalogError(f"Bad price for service {raw_id!r}: {row['price_per_unit']!r}")

            entries.append(ServiceEntry(
                id=int(raw_id) if raw_id.isdigit() else raw_id,
                name=row["name"].strip(),
                price_per_unit=price,
                unit=(row.get("unit") or "unit").strip(),
                category=(row.get("category") or "").strip() or None,
            ))

        catalog = cls(entries)
        logger.info("Loaded %d services from %s", len(catalog), path)
        return catalog


def resolve_service(catalog: ServiceCatalog, service_id: ServiceId) -> ServiceEntry:
    """
    Resolve a service id against the catalog.

    Raises UnknownService when nothing matches, including for None,
    empty strings and out-of-range integers.
    """
    entry = catalog.get(service_id)
    if entry is None:
        raise UnknownService(service_id)
    return entry
