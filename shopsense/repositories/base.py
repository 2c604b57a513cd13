import asyncio
from abc import ABC, abstractmethod
from typing import Optional, TypeVar

from shopsense.models import Appointment, Customer, Message, Quote, TechSheet

T = TypeVar("T")

# Chronological sort key per entity; ties fall back to id, which is monotonic.
ORDER_ATTRIBUTES = {
    Message: "timestamp",
    Customer: "created_at",
    Quote: "created_at",
    Appointment: "created_at",
    TechSheet: "created_at",
}


class ShopRepository(ABC):
    """Storage boundary for every entity the pipeline reads or writes.

    All list results are chronological (oldest first). Implementations must
    return the same instance that was upserted so callers can keep mutating
    it and upsert again.
    """

    def __init__(self) -> None:
        self._contact_locks: dict[str, asyncio.Lock] = {}

    @abstractmethod
    def get(self, model: type[T], entity_id: str) -> Optional[T]:
        """Fetch one entity by primary key."""

    @abstractmethod
    def list(self, model: type[T], **filters) -> list[T]:
        """List entities whose attributes equal every given filter."""

    @abstractmethod
    def upsert(self, entity: T) -> T:
        """Insert or update an entity."""

    def get_customer_by_contact(self, contact_id: str) -> Optional[Customer]:
        customers = self.list(Customer, contact_id=contact_id)
        return customers[0] if customers else None

    def contact_lock(self, contact_id: str) -> asyncio.Lock:
        """Mutex serializing pipeline work for one contact."""
        lock = self._contact_locks.get(contact_id)
        if lock is None:
            lock = asyncio.Lock()
            self._contact_locks[contact_id] = lock
        return lock
