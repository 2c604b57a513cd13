from typing import Optional, TypeVar

from shopsense.repositories.base import ORDER_ATTRIBUTES, ShopRepository

T = TypeVar("T")


class InMemoryRepository(ShopRepository):
    """Process-local storage. State is lost on restart."""

    def __init__(self) -> None:
        super().__init__()
        self._rows: dict[type, dict[str, object]] = {}

    def get(self, model: type[T], entity_id: str) -> Optional[T]:
        return self._rows.get(model, {}).get(entity_id)

    def list(self, model: type[T], **filters) -> list[T]:
        rows = [
            row
            for row in self._rows.get(model, {}).values()
            if all(getattr(row, key) == value for key, value in filters.items())
        ]
        order_attr = ORDER_ATTRIBUTES.get(model)
        if order_attr:
            rows.sort(key=lambda row: (getattr(row, order_attr), row.id))
        return rows

    def upsert(self, entity: T) -> T:
        self._rows.setdefault(type(entity), {})[entity.id] = entity
        return entity
