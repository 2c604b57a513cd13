from typing import List, Optional, Sequence

from shopsense.logging_config import get_logger
from shopsense.services.fallback_service import ConversationTurn, fallback_reply
from shopsense.services.llm import LLMProvider, prompt_messages
from shopsense.services.replies import SOURCE_LLM, DerivedReply, ParsedReply, parse_model_reply

logger = get_logger("ai_service")

MAX_HISTORY_MESSAGES = 10
CHAT_TEMPERATURE = 0.6
CHAT_MAX_TOKENS = 600

SYSTEM_PROMPT_TEMPLATE = """You are a professional, friendly assistant for {business_name}, an automotive repair shop.

CONVERSATION STYLE:
- Be natural and conversational, not pushy or aggressive
- Take whatever information the customer gives you naturally
- Focus on helping them with their actual need first
- Collect info organically during natural conversation

APPOINTMENT BOOKING:
When customers want to schedule service or confirm appointments:
- Suggest specific days and times (Monday-Friday, 8am-5pm)
- Confirm their preferred date and time
- Get essential info: name, vehicle, service needed
- Use this EXACT format in the Action line when booking is confirmed:
  "BOOKING_CONFIRMED: [Customer Name] | [Phone] | [Vehicle] | [Service] | [Day] | [Time]"

QUOTES:
- When you give a price, write it as a dollar amount (e.g. $240) and the labor hours (e.g. 3 hours)
- Use the word "Quote" in the Intent line when you are quoting a price

QUOTE ACCEPTANCE:
When customers accept quotes or say "yes" to pricing:
- Confirm the acceptance
- Use format in the Action line: "QUOTE_ACCEPTED: [Service] | [Price] | [Vehicle]"

EMERGENCY DETECTION:
If the message contains urgent keywords (emergency, urgent, breakdown, stranded, accident):
- Respond immediately with emergency protocol
- Use format in the Action line: "URGENT: [Brief description]"

CONVERSATION RULES:
- Use the conversation history to provide contextual responses
- If the customer says "yes" or agrees, refer to what they're agreeing to based on context
- Your labor rate is ${labor_rate}/hr with a 1-hour minimum

RESPONSE FORMAT:
Reply: [The natural, helpful message that addresses their need]
Intent: [e.g. Quote Request, Booking Confirmation, Service Inquiry, Emergency]
Action: [e.g. BOOKING_CONFIRMED: details, Provide quote, Ask for vehicle details]
CustomerData: [optional single-line JSON with any of firstName, lastName, address, isRepeatCustomer, vehicle {{year, make, model, details}}]"""

HISTORY_PROMPT_TEMPLATE = """CONVERSATION HISTORY (last {count} messages, most recent last):
{history}

CURRENT MESSAGE FROM CUSTOMER: "{message}"

Based on this conversation, provide a natural, helpful response that:
1. Addresses their current message appropriately
2. Focuses on their automotive service needs
3. Moves the conversation forward naturally
4. If they want to book an appointment, confirm details and use BOOKING_CONFIRMED format
5. If they're accepting a quote, use QUOTE_ACCEPTED format
6. If it's an emergency, use URGENT format"""

NEW_CUSTOMER_PROMPT_TEMPLATE = """NEW CUSTOMER MESSAGE: "{message}"

This is a new conversation. Provide a professional, natural response that:
1. Addresses their automotive inquiry helpfully
2. Focuses on their service needs first
3. Only asks for essential info if needed for their specific request
4. If they want to book, use BOOKING_CONFIRMED format
5. If emergency, use URGENT format"""


def build_system_prompt(business_name: str, labor_rate: int) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(business_name=business_name, labor_rate=labor_rate)


def build_user_prompt(message_text: str, history: Sequence[ConversationTurn]) -> str:
    """Render the conversation as ``CUSTOMER:``/``YOU:`` lines, or a new-customer prompt."""
    recent = list(history)[-MAX_HISTORY_MESSAGES:]
    if not recent:
        return NEW_CUSTOMER_PROMPT_TEMPLATE.format(message=message_text)

    lines = [f'{"CUSTOMER" if turn.direction == "inbound" else "YOU"}: "{turn.body}"' for turn in recent]
    return HISTORY_PROMPT_TEMPLATE.format(count=len(recent), history="\n".join(lines), message=message_text)


class ResponseClient:
    """Derives a reply from the remote model, converging to the keyword engine on any failure."""

    def __init__(self, provider: Optional[LLMProvider], business_name: str, labor_rate: int):
        self.provider = provider
        self.business_name = business_name
        self.labor_rate = labor_rate

    def fallback(self, message_text: str, history: Sequence[ConversationTurn]) -> DerivedReply:
        return fallback_reply(
            message_text,
            history,
            business_name=self.business_name,
            labor_rate=self.labor_rate,
        )

    def build_messages(self, message_text: str, history: Sequence[ConversationTurn]) -> List[dict]:
        return prompt_messages(
            build_system_prompt(self.business_name, self.labor_rate),
            build_user_prompt(message_text, history),
        )

    async def derive_reply(self, message_text: str, history: Sequence[ConversationTurn] = ()) -> DerivedReply:
        """Never raises: any provider error or unusable output yields the fallback reply."""
        recent = list(history)[-MAX_HISTORY_MESSAGES:]

        if self.provider is None:
            logger.info("LLM not configured, using fallback reply")
            return self.fallback(message_text, recent)

        try:
            response = await self.provider.generate(
                messages=self.build_messages(message_text, recent),
                temperature=CHAT_TEMPERATURE,
                max_tokens=CHAT_MAX_TOKENS,
            )
        except Exception as e:
            logger.warning(
                f"LLM call failed, using fallback reply: {e}",
                extra={"context": {"error_type": type(e).__name__}},
            )
            return self.fallback(message_text, recent)

        parsed = parse_model_reply(response.content)
        if not isinstance(parsed, ParsedReply):
            logger.warning(
                "LLM reply unparseable, using fallback reply",
                extra={"context": {"raw_text": parsed.raw_text[:200]}},
            )
            return self.fallback(message_text, recent)

        logger.info(
            "LLM reply derived",
            extra={"context": {"intent": parsed.intent, "action": parsed.action[:100]}},
        )
        return DerivedReply(
            reply=parsed.reply,
            intent=parsed.intent,
            action=parsed.action,
            fields=parsed.fields,
            source=SOURCE_LLM,
        )
