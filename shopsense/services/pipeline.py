from typing import Optional

from shopsense.config import Settings
from shopsense.logging_config import LoggerAdapter, contact_logger, get_logger
from shopsense.repositories import ShopRepository
from shopsense.services.action_dispatcher import ActionDispatcher, is_emergency
from shopsense.services.ai_service import MAX_HISTORY_MESSAGES, ResponseClient
from shopsense.services.conversation_store import INBOUND, ConversationStore
from shopsense.services.customer_service import CustomerService
from shopsense.services.delivery_service import DeliveryService

logger = get_logger("pipeline")


class MessagePipeline:
    """Inbound SMS handling: store, DND gate, derive reply, dispatch actions, deliver."""

    def __init__(
        self,
        settings: Settings,
        repository: ShopRepository,
        store: ConversationStore,
        customers: CustomerService,
        response_client: ResponseClient,
        dispatcher: ActionDispatcher,
        delivery: DeliveryService,
    ):
        self.settings = settings
        self.repository = repository
        self.store = store
        self.customers = customers
        self.response_client = response_client
        self.dispatcher = dispatcher
        self.delivery = delivery

    @property
    def auto_response_ready(self) -> bool:
        return self.settings.openai_configured and self.settings.openphone_configured

    async def process_inbound(self, contact_id: str, text: str) -> bool:
        """Process one inbound SMS. Returns True when an auto-response was attempted.

        Never raises. Messages from the same contact are processed one at a time.
        """
        log = contact_logger(logger, contact_id)
        try:
            async with self.repository.contact_lock(contact_id):
                return await self._process(contact_id, text, log)
        except Exception as e:
            log.error(f"Inbound processing failed: {e}", exc_info=True)
            return False

    async def _process(self, contact_id: str, text: str, log: LoggerAdapter) -> bool:
        inbound = self.store.record(contact_id, text, INBOUND)
        customer = self.customers.record_interaction(contact_id, text)

        if not self.settings.dnd_enabled:
            log.info("DND disabled, message stored without auto-response", context={"message_id": inbound.id})
            return False

        if not self.auto_response_ready:
            log.warning(
                "Auto-response not configured, manual response required",
                context={
                    "message_id": inbound.id,
                    "openai_configured": self.settings.openai_configured,
                    "openphone_configured": self.settings.openphone_configured,
                },
            )
            return False

        history = self.store.recent(contact_id, MAX_HISTORY_MESSAGES, exclude_id=inbound.id)
        derived = await self.response_client.derive_reply(text, history)
        self.store.back_fill(inbound.id, derived)
        log.info(
            "Reply derived",
            context={"message_id": inbound.id, "intent": derived.intent, "source": derived.source},
        )

        await self.dispatcher.dispatch(contact_id, text, derived, customer, history)
        await self.delivery.deliver(contact_id, derived.reply, emergency=is_emergency(derived))
        return True

    def capture_phone_number_id(self, phone_number_id: Optional[str]) -> None:
        if self.delivery.sms is not None:
            self.delivery.sms.set_phone_number_id(phone_number_id)
