from datetime import datetime, timezone
from typing import Optional

from shopsense.logging_config import get_logger
from shopsense.models import Customer
from shopsense.repositories import ShopRepository
from shopsense.services.ids import new_id

logger = get_logger("customer_service")

SERVICE_EVENT_TYPE = "sms_inquiry"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class CustomerService:
    def __init__(self, repository: ShopRepository):
        self.repository = repository

    def get(self, contact_id: str) -> Optional[Customer]:
        return self.repository.get_customer_by_contact(contact_id)

    def list_customers(self) -> list[Customer]:
        return self.repository.list(Customer)

    def record_interaction(self, contact_id: str, inquiry: str) -> Customer:
        """Create the customer on first contact, otherwise mark them as a repeat customer.

        Every inbound message appends one ``sms_inquiry`` event to the service history.
        """
        now = _now()
        customer = self.get(contact_id)
        if customer is None:
            customer = Customer(
                id=new_id(),
                contact_id=contact_id,
                is_repeat_customer=None,
                vehicles=[],
                service_history=[],
                created_at=now,
                updated_at=now,
            )
            logger.info("New customer record created", extra={"context": {"contact_id": contact_id}})
        else:
            customer.is_repeat_customer = True

        event = {"date": now.isoformat(), "inquiry": inquiry, "type": SERVICE_EVENT_TYPE}
        customer.service_history = [*(customer.service_history or []), event]
        customer.updated_at = now
        return self.repository.upsert(customer)

    def apply_customer_data(self, customer: Customer, data: Optional[dict]) -> Customer:
        """Merge model-extracted ``CustomerData`` fields into the record."""
        if not data or not isinstance(data, dict):
            return customer

        changed = False

        name = _clean(data.get("fullName")) or _clean(data.get("name"))
        if name is None:
            parts = [_clean(data.get("firstName")), _clean(data.get("lastName"))]
            name = " ".join(part for part in parts if part) or None
        if name and name != customer.name:
            customer.name = name
            changed = True

        address = _clean(data.get("address"))
        if address and address != customer.address:
            customer.address = address
            changed = True

        is_repeat = data.get("isRepeatCustomer")
        if isinstance(is_repeat, bool) and is_repeat != customer.is_repeat_customer:
            # A contact with more than one inbound message stays a repeat customer.
            if is_repeat or len(customer.service_history or []) <= 1:
                customer.is_repeat_customer = is_repeat
                changed = True

        vehicle = data.get("vehicle")
        if isinstance(vehicle, dict):
            changed = self._add_vehicle(customer, vehicle) or changed

        if changed:
            customer.updated_at = _now()
            self.repository.upsert(customer)
            logger.info(
                "Customer record updated",
                extra={
                    "context": {
                        "contact_id": customer.contact_id,
                        "name": customer.name or "Unknown",
                        "vehicles": len(customer.vehicles or []),
                        "is_repeat": customer.is_repeat_customer,
                    }
                },
            )
        return customer

    def _add_vehicle(self, customer: Customer, vehicle: dict) -> bool:
        year, make, model = (_clean(vehicle.get(key)) for key in ("year", "make", "model"))
        details = _clean(vehicle.get("details")) or " ".join(part for part in (year, make, model) if part)
        if not details:
            return False
        vehicles = customer.vehicles or []
        if any(existing.get("details") == details for existing in vehicles):
            return False
        record = {"year": year, "make": make, "model": model, "details": details, "added_at": _now().isoformat()}
        customer.vehicles = [*vehicles, record]
        logger.info("Vehicle added to customer record", extra={"context": {"contact_id": customer.contact_id}})
        return True

    @staticmethod
    def vehicle_info(customer: Optional[Customer]) -> Optional[str]:
        """Details of the most recently added vehicle."""
        if customer is None or not customer.vehicles:
            return None
        return customer.vehicles[-1].get("details")
