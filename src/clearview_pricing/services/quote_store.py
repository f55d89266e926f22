"""
Quote Store - saved quotes behind a narrow storage interface.

Callers depend on QuoteStore; InMemoryQuoteStore is the only backend shipped.
"""
import itertools
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..engine.models import Quote


@dataclass(frozen=True)
class SavedQuote:
    """A quote saved on behalf of a technician."""
    quote_id: int
    technician_id: str
    quote: Quote
    saved_at: datetime

    def to_dict(self) -> dict:
        data = self.quote.to_response_dict()
        data.update({
            "id": self.quote_id,
            "technicianId": self.technician_id,
            "savedAt": self.saved_at.isoformat(),
        })
        return data


class QuoteStore(ABC):
    @abstractmethod
    def save(self, quote: Quote, technician_id: str) -> int:
        """Persist a quote and return its id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, quote_id: int) -> Optional[SavedQuote]:
        raise NotImplementedError

    @abstractmethod
    def list_by_technician(self, technician_id: str) -> list[SavedQuote]:
        """Saved quotes for a technician, oldest first."""
        raise NotImplementedError


class InMemoryQuoteStore(QuoteStore):
    def __init__(self) -> None:
        self._quotes: dict[int, SavedQuote] = {}
        self._by_technician: dict[str, list[int]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, quote: Quote, technician_id: str) -> int:
        technician_id = str(technician_id).strip()
        if not technician_id:
            raise ValueError("technician_id is required to save a quote")

        with self._lock:
            quote_id = next(self._ids)
            self._quotes[quote_id] = SavedQuote(
                quote_id=quote_id,
                technician_id=technician_id,
                quote=quote,
                saved_at=datetime.now(timezone.utc),
            )
            self._by_technician.setdefault(technician_id, []).append(quote_id)
        return quote_id

    def get(self, quote_id: int) -> Optional[SavedQuote]:
        with self._lock:
            return self._quotes.get(quote_id)

    def list_by_technician(self, technician_id: str) -> list[SavedQuote]:
        with self._lock:
            ids = list(self._by_technician.get(str(technician_id).strip(), []))
            return [self._quotes[i] for i in ids]

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)
