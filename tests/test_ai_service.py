from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from shopsense.services.ai_service import (
    CHAT_MAX_TOKENS,
    CHAT_TEMPERATURE,
    MAX_HISTORY_MESSAGES,
    ResponseClient,
    build_system_prompt,
    build_user_prompt,
)
from shopsense.services.llm import LLMProviderError, LLMResponse
from shopsense.services.replies import SOURCE_FALLBACK, SOURCE_LLM


def make_client(provider):
    return ResponseClient(provider, business_name="Pink Chicken Speed Shop", labor_rate=80)


def make_provider(content=None, side_effect=None):
    provider = Mock()
    provider.generate = AsyncMock(
        return_value=LLMResponse(content=content or "", model="gpt-4o"),
        side_effect=side_effect,
    )
    return provider


class TestPrompts:
    def test_system_prompt_mentions_shop_and_rate(self):
        prompt = build_system_prompt("Torque Garage", 95)

        assert "Torque Garage" in prompt
        assert "$95/hr" in prompt
        assert "Reply:" in prompt
        assert "CustomerData:" in prompt

    def test_new_customer_prompt_without_history(self):
        prompt = build_user_prompt("Need brakes", [])

        assert prompt.startswith('NEW CUSTOMER MESSAGE: "Need brakes"')

    def test_history_rendered_as_customer_and_you_lines(self):
        history = [
            SimpleNamespace(direction="inbound", body="Hi"),
            SimpleNamespace(direction="outbound", body="Hello! How can I help?"),
        ]

        prompt = build_user_prompt("Brakes squeal", history)

        assert 'CUSTOMER: "Hi"' in prompt
        assert 'YOU: "Hello! How can I help?"' in prompt
        assert 'CURRENT MESSAGE FROM CUSTOMER: "Brakes squeal"' in prompt
        assert "last 2 messages" in prompt

    def test_history_capped(self):
        history = [SimpleNamespace(direction="inbound", body=f"m{i}") for i in range(15)]

        prompt = build_user_prompt("latest", history)

        assert f"last {MAX_HISTORY_MESSAGES} messages" in prompt
        assert '"m4"' not in prompt
        assert '"m5"' in prompt


class TestDeriveReply:
    @pytest.mark.asyncio
    async def test_parsed_model_reply_is_used(self):
        provider = make_provider("Reply: Brake pads are $240 for 3 hours\nIntent: Quote Request\nAction: Provide quote")

        result = await make_client(provider).derive_reply("how much for brakes?")

        assert result.source == SOURCE_LLM
        assert result.reply == "Brake pads are $240 for 3 hours"
        assert result.intent == "Quote Request"
        kwargs = provider.generate.call_args.kwargs
        assert kwargs["temperature"] == CHAT_TEMPERATURE
        assert kwargs["max_tokens"] == CHAT_MAX_TOKENS
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1]["role"] == "user"

    @pytest.mark.asyncio
    async def test_customer_data_passed_through(self):
        provider = make_provider('Reply: Thanks Sam\nIntent: Service Request\nAction: Note\nCustomerData: {"firstName": "Sam"}')

        result = await make_client(provider).derive_reply("I'm Sam")

        assert result.fields == {"firstName": "Sam"}

    @pytest.mark.asyncio
    async def test_provider_error_uses_fallback(self):
        provider = make_provider(side_effect=LLMProviderError("OpenAI API error: 429", status_code=429))

        result = await make_client(provider).derive_reply("I'm stranded on the highway")

        assert result.source == SOURCE_FALLBACK
        assert result.intent == "Emergency"

    @pytest.mark.asyncio
    async def test_unexpected_exception_uses_fallback(self):
        provider = make_provider(side_effect=RuntimeError("boom"))

        result = await make_client(provider).derive_reply("how much for an oil change")

        assert result.source == SOURCE_FALLBACK
        assert result.intent == "Service Request"

    @pytest.mark.asyncio
    async def test_unparseable_reply_uses_fallback(self):
        provider = make_provider("   ")

        result = await make_client(provider).derive_reply("hello")

        assert result.source == SOURCE_FALLBACK
        assert result.intent == "General Inquiry"

    @pytest.mark.asyncio
    async def test_missing_provider_uses_fallback(self):
        result = await make_client(None).derive_reply("hello")

        assert result.source == SOURCE_FALLBACK

    @pytest.mark.asyncio
    async def test_fallback_sees_history(self):
        provider = make_provider(side_effect=LLMProviderError("timeout"))
        history = [SimpleNamespace(direction="outbound", body="Want me to schedule that?")]

        result = await make_client(provider).derive_reply("yes", history)

        assert result.intent == "Booking Confirmation"
