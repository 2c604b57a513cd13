import math
from datetime import datetime, timezone
from typing import Optional

from shopsense.logging_config import get_logger
from shopsense.models import Appointment, Quote
from shopsense.repositories import ShopRepository
from shopsense.services.extraction_service import BookingSlot
from shopsense.services.ids import new_id

logger = get_logger("appointment_service")

STATUS_SCHEDULED = "scheduled"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

DEFAULT_SERVICE_TYPE = "General Service"
DEFAULT_VEHICLE_INFO = "Vehicle TBD"


class AppointmentService:
    def __init__(self, repository: ShopRepository):
        self.repository = repository

    def list_appointments(self) -> list[Appointment]:
        return self.repository.list(Appointment)

    def schedule(
        self,
        contact_id: str,
        slot: BookingSlot,
        *,
        vehicle_info: str,
        service_type: str = DEFAULT_SERVICE_TYPE,
        customer_name: Optional[str] = None,
        duration_hours: float = 1.0,
        quote_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        appointment = Appointment(
            id=new_id(),
            contact_id=contact_id,
            customer_name=customer_name,
            vehicle_info=vehicle_info,
            service_type=service_type,
            date=slot.date,
            time=slot.time,
            duration_hours=duration_hours,
            status=STATUS_SCHEDULED,
            quote_id=quote_id,
            notes=notes,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.upsert(appointment)
        logger.info(
            "Appointment scheduled",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "contact_id": contact_id,
                    "date": slot.date,
                    "time": slot.time,
                    "quote_id": quote_id,
                }
            },
        )
        return appointment

    def schedule_for_quote(
        self,
        quote: Quote,
        slot: BookingSlot,
        *,
        vehicle_info: Optional[str] = None,
        service_type: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> Appointment:
        """Book the work from an accepted quote. Duration rounds labor hours up, one hour minimum.

        The keyword arguments only fill in what the quote lacks.
        """
        quote_vehicle = quote.vehicle_info if quote.vehicle_info != DEFAULT_VEHICLE_INFO else None
        return self.schedule(
            quote.contact_id,
            slot,
            vehicle_info=quote_vehicle or vehicle_info or DEFAULT_VEHICLE_INFO,
            service_type=quote.description or service_type or DEFAULT_SERVICE_TYPE,
            customer_name=quote.customer_name or customer_name,
            duration_hours=float(max(1, math.ceil(quote.labor_hours or 0))),
            quote_id=quote.id,
            notes=f"Booked from accepted quote {quote.id}",
        )
