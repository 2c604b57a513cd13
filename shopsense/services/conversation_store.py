from datetime import datetime, timezone
from typing import Optional

from shopsense.logging_config import get_logger
from shopsense.models import Message
from shopsense.repositories import ShopRepository
from shopsense.services.ids import new_id
from shopsense.services.replies import DerivedReply

logger = get_logger("conversation_store")

INBOUND = "inbound"
OUTBOUND = "outbound"


class ConversationStore:
    """Append-only message log per contact."""

    def __init__(self, repository: ShopRepository):
        self.repository = repository

    def append(self, message: Message) -> Message:
        return self.repository.upsert(message)

    def record(self, contact_id: str, body: str, direction: str, *, id_suffix: str = "") -> Message:
        """Build and append a message. Outbound messages are stored already processed and read."""
        outbound = direction == OUTBOUND
        message = Message(
            id=new_id(id_suffix),
            contact_id=contact_id,
            body=body,
            direction=direction,
            timestamp=datetime.now(timezone.utc),
            processed=outbound,
            read=outbound,
        )
        self.append(message)
        logger.info(
            "Message stored",
            extra={"context": {"message_id": message.id, "contact_id": contact_id, "direction": direction}},
        )
        return message

    def recent(self, contact_id: str, limit: int = 10, *, exclude_id: Optional[str] = None) -> list[Message]:
        """Last ``limit`` messages for a contact, oldest first."""
        messages = [m for m in self.repository.list(Message, contact_id=contact_id) if m.id != exclude_id]
        if limit <= 0:
            return []
        return messages[-limit:]

    def all(self, limit: Optional[int] = None) -> list[Message]:
        """Every message, newest first."""
        messages = list(reversed(self.repository.list(Message)))
        return messages[:limit] if limit is not None else messages

    def mark_read(self, message_id: str) -> bool:
        message = self.repository.get(Message, message_id)
        if message is None:
            return False
        if not message.read:
            message.read = True
            self.repository.upsert(message)
        return True

    def back_fill(self, message_id: str, derived: DerivedReply) -> Optional[Message]:
        """Attach the derived reply to an inbound message. Only the first call has an effect."""
        message = self.repository.get(Message, message_id)
        if message is None or message.processed:
            return message
        message.processed = True
        message.derived_intent = derived.intent
        message.derived_action = derived.action
        message.ai_reply_text = derived.reply
        message.customer_data = dict(derived.fields)
        return self.repository.upsert(message)
