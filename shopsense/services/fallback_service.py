"""Deterministic keyword responder used when the remote model is unavailable.

Categories are checked in a fixed order and the first match wins:

1. affirmative reply to the last message we sent (booking / quote / generic)
2. emergency
3. service / maintenance
4. pricing
5. problem / repair
6. booking
7. general inquiry (catch-all)

The engine is a pure function of its inputs.
"""

from typing import Optional, Protocol, Sequence

from shopsense.services.replies import SOURCE_FALLBACK, DerivedReply

AFFIRMATIVE_KEYWORDS = ("yes", "sure", "okay", "ok", "sounds good", "that works", "please")
BOOKING_PROPOSAL_KEYWORDS = ("schedule", "appointment", "bring")
QUOTE_PROPOSAL_KEYWORDS = ("quote", "estimate")
EMERGENCY_KEYWORDS = ("emergency", "urgent", "breakdown", "stranded", "accident", "help", "stuck")
SERVICE_KEYWORDS = ("oil change", "service", "maintenance", "tune up", "inspection")
PRICING_KEYWORDS = ("quote", "price", "cost", "estimate", "how much")
REPAIR_KEYWORDS = ("problem", "issue", "broken", "noise", "leak", "won't start", "not working")
BOOKING_KEYWORDS = ("appointment", "schedule", "book", "available", "when can")

INTENT_EMERGENCY = "Emergency"
INTENT_BOOKING_CONFIRMATION = "Booking Confirmation"
INTENT_QUOTE_CONFIRMATION = "Quote Confirmation"
INTENT_CONFIRMATION = "Confirmation"
INTENT_SERVICE_REQUEST = "Service Request"
INTENT_QUOTE_REQUEST = "Quote Request"
INTENT_REPAIR_REQUEST = "Repair Request"
INTENT_BOOKING_REQUEST = "Booking Request"
INTENT_GENERAL_INQUIRY = "General Inquiry"


class ConversationTurn(Protocol):
    direction: str
    body: str


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _last_outbound_body(history: Sequence[ConversationTurn]) -> Optional[str]:
    for turn in reversed(history):
        if turn.direction == "outbound":
            return turn.body or ""
    return None


def _reply(reply: str, intent: str, action: str) -> DerivedReply:
    return DerivedReply(reply=reply, intent=intent, action=action, fields={}, source=SOURCE_FALLBACK)


def _confirmation_reply(text: str, last_outbound: str) -> Optional[DerivedReply]:
    if not _contains_any(text, AFFIRMATIVE_KEYWORDS):
        return None

    proposal = last_outbound.lower()
    if _contains_any(proposal, BOOKING_PROPOSAL_KEYWORDS):
        return _reply(
            "Perfect! I'll get that appointment scheduled for you. Can I get your name for our appointment book?",
            INTENT_BOOKING_CONFIRMATION,
            "Schedule appointment and collect customer name",
        )
    if _contains_any(proposal, QUOTE_PROPOSAL_KEYWORDS):
        return _reply(
            "Great! I'll prepare that quote for you. What's your name so I can personalize the quote?",
            INTENT_QUOTE_CONFIRMATION,
            "QUOTE_ACCEPTED: prepare quote and collect customer name",
        )
    return _reply(
        "Excellent! I'll take care of that for you. Can I get your name to help you properly?",
        INTENT_CONFIRMATION,
        "Follow up with confirmed service and collect name",
    )


def fallback_reply(
    message_text: str,
    history: Sequence[ConversationTurn] = (),
    *,
    business_name: str,
    labor_rate: int,
) -> DerivedReply:
    """Pick a templated reply for ``message_text``. Total and side-effect free."""
    text = (message_text or "").lower()
    rate = f"${labor_rate}/hr"

    last_outbound = _last_outbound_body(history)
    if last_outbound is not None:
        confirmation = _confirmation_reply(text, last_outbound)
        if confirmation is not None:
            return confirmation

    if _contains_any(text, EMERGENCY_KEYWORDS):
        return _reply(
            "🚨 EMERGENCY RECEIVED! I got your urgent message and will respond immediately. "
            "If you're in immediate danger, please call 911. Otherwise, I'll contact you within 15 minutes. Stay safe!",
            INTENT_EMERGENCY,
            "URGENT - Contact customer immediately",
        )

    if _contains_any(text, SERVICE_KEYWORDS):
        return _reply(
            "Hi! Thanks for reaching out about service. I'd be happy to help with your vehicle maintenance. "
            f"My rate is {rate} with a 1-hour minimum. What vehicle are you bringing in, and can I get your name?",
            INTENT_SERVICE_REQUEST,
            "Collect vehicle and service details",
        )

    if _contains_any(text, PRICING_KEYWORDS):
        return _reply(
            "Thanks for your quote request! I'd be happy to provide an estimate. "
            f"My labor rate is {rate} with a 1-hour minimum. What vehicle and service are you looking to get done?",
            INTENT_QUOTE_REQUEST,
            "Collect vehicle and service details for quote",
        )

    if _contains_any(text, REPAIR_KEYWORDS):
        return _reply(
            "I received your message about the issue with your vehicle. "
            f"My diagnostic rate is {rate}. Can you tell me what vehicle you have and describe what's happening?",
            INTENT_REPAIR_REQUEST,
            "Diagnose issue and collect vehicle details",
        )

    if _contains_any(text, BOOKING_KEYWORDS):
        return _reply(
            "Thanks for wanting to schedule service! We're open Monday-Friday, 8am-5pm. "
            f"My rate is {rate} with a 1-hour minimum. What day and time works best for you?",
            INTENT_BOOKING_REQUEST,
            "Collect preferred appointment time",
        )

    return _reply(
        f"Hi! Thanks for your message. This is {business_name} and I received your inquiry. "
        f"I'll get back to you personally within the hour. My rate is {rate}. What can I help you with today?",
        INTENT_GENERAL_INQUIRY,
        "Review message and collect customer name",
    )
