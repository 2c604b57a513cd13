from datetime import datetime, timedelta, timezone
from typing import Optional

from shopsense.logging_config import get_logger
from shopsense.models import Quote
from shopsense.repositories import ShopRepository
from shopsense.services.ids import new_id

logger = get_logger("quote_service")

QUOTE_VALIDITY = timedelta(days=7)
ACCEPTANCE_WINDOW = timedelta(hours=24)
QUOTE_SOURCE = "sms_conversation"

STATUS_DRAFT = "draft"
STATUS_SENT = "sent"
STATUS_ACCEPTED = "accepted"
STATUS_DECLINED = "declined"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class QuoteService:
    def __init__(self, repository: ShopRepository, labor_rate: int):
        self.repository = repository
        self.labor_rate = labor_rate

    def list_quotes(self) -> list[Quote]:
        return self.repository.list(Quote)

    def create_quote(
        self,
        contact_id: str,
        total_cost: float,
        labor_hours: float,
        *,
        description: str,
        vehicle_info: str,
        customer_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Quote:
        """Create a ``sent`` quote. Parts cost is whatever the total leaves after labor."""
        now = now or datetime.now(timezone.utc)
        labor_cost = labor_hours * self.labor_rate
        quote = Quote(
            id=new_id(),
            contact_id=contact_id,
            customer_name=customer_name,
            vehicle_info=vehicle_info,
            description=description,
            labor_hours=labor_hours,
            labor_rate=float(self.labor_rate),
            parts_cost=max(0.0, total_cost - labor_cost),
            total_cost=total_cost,
            status=STATUS_SENT,
            source=QUOTE_SOURCE,
            created_at=now,
            expires_at=now + QUOTE_VALIDITY,
        )
        self.repository.upsert(quote)
        logger.info(
            "Quote created",
            extra={
                "context": {
                    "quote_id": quote.id,
                    "contact_id": contact_id,
                    "total_cost": total_cost,
                    "labor_hours": labor_hours,
                }
            },
        )
        return quote

    def find_acceptable(self, contact_id: str, now: Optional[datetime] = None) -> Optional[Quote]:
        """Newest ``sent`` quote for the contact created within the acceptance window."""
        now = now or datetime.now(timezone.utc)
        candidates = [
            quote
            for quote in self.repository.list(Quote, contact_id=contact_id, status=STATUS_SENT)
            if now - _as_utc(quote.created_at) <= ACCEPTANCE_WINDOW
        ]
        return candidates[-1] if candidates else None

    def accept(self, quote: Quote, now: Optional[datetime] = None) -> Quote:
        quote.status = STATUS_ACCEPTED
        quote.accepted_at = now or datetime.now(timezone.utc)
        self.repository.upsert(quote)
        logger.info("Quote accepted", extra={"context": {"quote_id": quote.id, "contact_id": quote.contact_id}})
        return quote
