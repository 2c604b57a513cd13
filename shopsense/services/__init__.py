from shopsense.services.ai_service import ResponseClient
from shopsense.services.conversation_store import INBOUND, OUTBOUND, ConversationStore
from shopsense.services.fallback_service import fallback_reply
from shopsense.services.pipeline import MessagePipeline
from shopsense.services.replies import DerivedReply, ParsedReply, UnparseableReply, parse_model_reply
