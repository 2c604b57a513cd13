"""Turns a derived reply into quote, appointment, customer and tech sheet side effects.

Each side effect runs on its own; a failure is logged and the remaining ones
still run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from shopsense.logging_config import get_logger
from shopsense.models import Appointment, Customer, Message, Quote, TechSheet
from shopsense.services.alert_service import AlertService
from shopsense.services.appointment_service import DEFAULT_VEHICLE_INFO, AppointmentService
from shopsense.services.conversation_store import INBOUND
from shopsense.services.customer_service import CustomerService
from shopsense.services.extraction_service import (
    BookingDirective,
    extract_labor_hours,
    extract_total_price,
    parse_booking_directive,
    resolve_booking_slot,
)
from shopsense.services.quote_service import QuoteService
from shopsense.services.replies import DerivedReply
from shopsense.services.tech_sheet_service import TechSheetService

logger = get_logger("action_dispatcher")

QUOTE_ACCEPTED_MARKER = "QUOTE_ACCEPTED"
URGENT_MARKER = "URGENT"

BOOKING_TERMS = ("booking", "appointment", "schedule")
CONFIRMATION_TERMS = ("confirm", "accept")
EMERGENCY_TERMS = ("emergency", "urgent", "breakdown", "stranded", "accident")


@dataclass
class DispatchOutcome:
    customer: Optional[Customer] = None
    quote: Optional[Quote] = None
    accepted_quote: Optional[Quote] = None
    appointment: Optional[Appointment] = None
    tech_sheet: Optional[TechSheet] = None
    emergency: bool = False
    errors: List[str] = field(default_factory=list)


def is_confirmation(derived: DerivedReply) -> bool:
    intent = derived.intent.lower()
    return any(term in intent for term in CONFIRMATION_TERMS) or QUOTE_ACCEPTED_MARKER in derived.action.upper()


def is_quote(derived: DerivedReply) -> bool:
    return "quote" in derived.intent.lower() or "quote" in derived.action.lower()


def is_booking(derived: DerivedReply) -> bool:
    labels = f"{derived.intent} {derived.action}".lower()
    return any(term in labels for term in BOOKING_TERMS)


def is_quote_confirmation(derived: DerivedReply) -> bool:
    return is_confirmation(derived) and "quote" in derived.intent.lower()


def is_emergency(derived: DerivedReply) -> bool:
    intent = derived.intent.lower()
    return any(term in intent for term in EMERGENCY_TERMS) or URGENT_MARKER in derived.action.upper()


class ActionDispatcher:
    def __init__(
        self,
        customers: CustomerService,
        quotes: QuoteService,
        appointments: AppointmentService,
        tech_sheets: TechSheetService,
        alerts: AlertService,
    ):
        self.customers = customers
        self.quotes = quotes
        self.appointments = appointments
        self.tech_sheets = tech_sheets
        self.alerts = alerts

    async def dispatch(
        self,
        contact_id: str,
        message_text: str,
        derived: DerivedReply,
        customer: Optional[Customer],
        history: Sequence[Message] = (),
    ) -> DispatchOutcome:
        outcome = DispatchOutcome(customer=customer)
        context = {"contact_id": contact_id, "intent": derived.intent}

        if customer is not None and derived.fields:
            try:
                outcome.customer = self.customers.apply_customer_data(customer, derived.fields)
            except Exception as e:
                self._record_failure(outcome, "customer_update", e, context)

        # Only the customer's words pick the slot; shop replies quote opening hours.
        conversation = [turn.body or "" for turn in history if turn.direction == INBOUND] + [message_text]
        directive = parse_booking_directive(derived.action)

        if is_confirmation(derived):
            await self._accept_quote(contact_id, conversation, directive, outcome, context)

        if outcome.accepted_quote is None:
            if is_quote(derived):
                self._create_quote(contact_id, message_text, derived, outcome, context)
            if is_booking(derived) and not is_quote_confirmation(derived):
                self._book_appointment(contact_id, conversation, derived, directive, outcome, context)

        if is_emergency(derived):
            outcome.emergency = True
            await self._escalate(contact_id, message_text, derived, context)

        return outcome

    async def _accept_quote(
        self,
        contact_id: str,
        conversation: List[str],
        directive: Optional[BookingDirective],
        outcome: DispatchOutcome,
        context: dict,
    ):
        try:
            quote = self.quotes.find_acceptable(contact_id)
            if quote is None:
                return
            outcome.accepted_quote = self.quotes.accept(quote)
        except Exception as e:
            self._record_failure(outcome, "quote_accept", e, context)
            return

        try:
            outcome.tech_sheet = await self.tech_sheets.generate_from_quote(quote)
        except Exception as e:
            self._record_failure(outcome, "tech_sheet", e, context)

        try:
            slot = resolve_booking_slot(conversation, datetime.now(timezone.utc).date(), directive)
            outcome.appointment = self.appointments.schedule_for_quote(
                quote,
                slot,
                vehicle_info=directive.vehicle if directive else None,
                service_type=directive.service if directive else None,
                customer_name=directive.name if directive else None,
            )
        except Exception as e:
            self._record_failure(outcome, "quote_appointment", e, context)

    def _create_quote(
        self, contact_id: str, message_text: str, derived: DerivedReply, outcome: DispatchOutcome, context: dict
    ):
        try:
            total = extract_total_price(derived.reply)
            if total is None:
                return
            customer = outcome.customer
            outcome.quote = self.quotes.create_quote(
                contact_id,
                total,
                extract_labor_hours(derived.reply),
                description=message_text,
                vehicle_info=self.customers.vehicle_info(customer) or DEFAULT_VEHICLE_INFO,
                customer_name=customer.name if customer else None,
            )
        except Exception as e:
            self._record_failure(outcome, "quote_create", e, context)

    def _book_appointment(
        self,
        contact_id: str,
        conversation: List[str],
        derived: DerivedReply,
        directive: Optional[BookingDirective],
        outcome: DispatchOutcome,
        context: dict,
    ):
        try:
            slot = resolve_booking_slot(conversation, datetime.now(timezone.utc).date(), directive)
            customer = outcome.customer
            vehicle_info = (
                (directive.vehicle if directive else None)
                or self.customers.vehicle_info(customer)
                or DEFAULT_VEHICLE_INFO
            )
            kwargs = {}
            if directive and directive.service:
                kwargs["service_type"] = directive.service
            outcome.appointment = self.appointments.schedule(
                contact_id,
                slot,
                vehicle_info=vehicle_info,
                customer_name=(customer.name if customer else None) or (directive.name if directive else None),
                notes=derived.action,
                **kwargs,
            )
        except Exception as e:
            self._record_failure(outcome, "appointment", e, context)

    async def _escalate(self, contact_id: str, message_text: str, derived: DerivedReply, context: dict):
        escalation = {**context, "message": message_text, "action": derived.action}
        logger.critical("URGENT ACTION REQUIRED: human escalation", extra={"context": escalation})
        try:
            await self.alerts.alert_critical(f"Emergency SMS from {contact_id}: {message_text[:200]}", escalation)
        except Exception as e:
            logger.error(f"Emergency alert failed: {e}")

    @staticmethod
    def _record_failure(outcome: DispatchOutcome, step: str, error: Exception, context: dict) -> None:
        outcome.errors.append(step)
        logger.error(
            f"Action dispatch step failed: {step}",
            extra={"context": {**context, "error": str(error)}},
            exc_info=True,
        )
