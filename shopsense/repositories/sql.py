from typing import Optional, TypeVar

from sqlalchemy.orm import Session, sessionmaker

from shopsense.logging_config import get_logger
from shopsense.repositories.base import ORDER_ATTRIBUTES, ShopRepository

logger = get_logger("repository.sql")

T = TypeVar("T")


class SqlRepository(ShopRepository):
    """SQLAlchemy-backed storage.

    Uses one long-lived session. Route handlers are coroutines, so the
    session is only touched from the event loop thread.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        super().__init__()
        self._session: Session = session_factory()

    def get(self, model: type[T], entity_id: str) -> Optional[T]:
        return self._session.get(model, entity_id)

    def list(self, model: type[T], **filters) -> list[T]:
        query = self._session.query(model).filter_by(**filters)
        order_attr = ORDER_ATTRIBUTES.get(model)
        if order_attr:
            query = query.order_by(getattr(model, order_attr), model.id)
        return query.all()

    def upsert(self, entity: T) -> T:
        try:
            self._session.add(entity)
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.error(
                "Repository upsert failed",
                extra={"context": {"entity": type(entity).__name__, "id": getattr(entity, "id", None)}},
            )
            raise
        return entity

    def close(self) -> None:
        self._session.close()
