from typing import Optional

from shopsense.logging_config import get_logger
from shopsense.models import Message
from shopsense.services.alert_service import AlertService
from shopsense.services.conversation_store import OUTBOUND, ConversationStore
from shopsense.services.openphone_service import OpenPhoneService, SmsDeliveryError
from shopsense.services.result import Result

logger = get_logger("delivery_service")

PIPELINE_ID_SUFFIX = "_out"
MANUAL_ID_SUFFIX = "_manual"


class DeliveryService:
    """Sends replies through OpenPhone and records them in the conversation."""

    def __init__(self, sms: Optional[OpenPhoneService], store: ConversationStore, alerts: AlertService):
        self.sms = sms
        self.store = store
        self.alerts = alerts

    @property
    def configured(self) -> bool:
        return self.sms is not None

    async def deliver(self, contact_id: str, reply: str, *, emergency: bool = False) -> Optional[Message]:
        """Send a pipeline reply. Never raises; a failed send asks for a manual response."""
        if self.sms is None:
            missing = Result.failure("SMS provider not configured", "not_configured", attempts=0)
            await self._manual_response_required(contact_id, reply, missing, emergency)
            return None

        result = await self.sms.send_sms(contact_id, reply)
        if not result.ok:
            await self._manual_response_required(contact_id, reply, result, emergency)
            return None

        # OpenPhone wraps the created message in "data".
        sent = result.unwrap_or({}) or {}
        data = sent.get("data")
        provider_id = data.get("id") if isinstance(data, dict) else sent.get("id")
        logger.info("Reply delivered", extra={"context": {"contact_id": contact_id, "provider_message_id": provider_id}})
        return self.store.record(contact_id, reply, OUTBOUND, id_suffix=PIPELINE_ID_SUFFIX)

    async def send_manual(self, contact_id: str, text: str) -> Message:
        """Operator reply. Raises ``SmsDeliveryError`` so the API can report the failure."""
        if self.sms is None:
            raise SmsDeliveryError("SMS provider not configured", code="not_configured")

        result = await self.sms.send_sms(contact_id, text)
        if not result.ok:
            raise SmsDeliveryError(result.error or "SMS delivery failed", code=result.error_code or "unknown")

        logger.info("Manual reply sent", extra={"context": {"contact_id": contact_id}})
        return self.store.record(contact_id, text, OUTBOUND, id_suffix=MANUAL_ID_SUFFIX)

    async def _manual_response_required(self, contact_id: str, reply: str, result: Result, emergency: bool) -> None:
        context = {
            **result.log_context(),
            "contact_id": contact_id,
            "suggested_reply": reply[:300],
            "emergency": emergency,
        }
        if emergency:
            logger.critical("MANUAL RESPONSE REQUIRED", extra={"context": context})
            await self.alerts.alert_critical(f"Emergency reply to {contact_id} was not delivered", context)
        else:
            logger.error("MANUAL RESPONSE REQUIRED", extra={"context": context})
            await self.alerts.alert_warning(f"Reply to {contact_id} was not delivered", context)
