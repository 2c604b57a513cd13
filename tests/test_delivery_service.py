from unittest.mock import AsyncMock, Mock

import pytest

from shopsense.models import Message
from shopsense.services.conversation_store import ConversationStore
from shopsense.services.delivery_service import DeliveryService
from shopsense.services.openphone_service import SmsDeliveryError
from shopsense.services.result import Result

CONTACT = "+15557654321"


def failing_sms():
    sms = Mock()
    sms.send_sms = AsyncMock(return_value=Result.failure("OpenPhone API error: 500", "http_error"))
    return sms


class TestDeliver:
    @pytest.mark.asyncio
    async def test_success_records_outbound_message(self, repository, sms, alerts):
        delivery = DeliveryService(sms, ConversationStore(repository), alerts)

        message = await delivery.deliver(CONTACT, "See you Thursday!")

        sms.send_sms.assert_awaited_once_with(CONTACT, "See you Thursday!")
        assert message.direction == "outbound"
        assert message.id.endswith("_out")
        assert repository.list(Message) == [message]

    @pytest.mark.asyncio
    async def test_failure_does_not_raise_or_record(self, repository, alerts):
        delivery = DeliveryService(failing_sms(), ConversationStore(repository), alerts)

        message = await delivery.deliver(CONTACT, "See you Thursday!")

        assert message is None
        assert repository.list(Message) == []
        alerts.alert_warning.assert_awaited_once()
        context = alerts.alert_warning.call_args[0][1]
        assert context["error_code"] == "http_error"
        assert context["suggested_reply"] == "See you Thursday!"

    @pytest.mark.asyncio
    async def test_emergency_failure_raises_critical_alert(self, repository, alerts):
        delivery = DeliveryService(failing_sms(), ConversationStore(repository), alerts)

        await delivery.deliver(CONTACT, "Help is on the way", emergency=True)

        alerts.alert_critical.assert_awaited_once()
        alerts.alert_warning.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_sms_client(self, repository, alerts):
        delivery = DeliveryService(None, ConversationStore(repository), alerts)

        assert await delivery.deliver(CONTACT, "hi") is None
        assert delivery.configured is False


class TestSendManual:
    @pytest.mark.asyncio
    async def test_records_manual_message(self, repository, sms, alerts):
        delivery = DeliveryService(sms, ConversationStore(repository), alerts)

        message = await delivery.send_manual(CONTACT, "Your car is ready")

        assert message.id.endswith("_manual")
        assert message.read is True

    @pytest.mark.asyncio
    async def test_failure_raises_delivery_error(self, repository, alerts):
        delivery = DeliveryService(failing_sms(), ConversationStore(repository), alerts)

        with pytest.raises(SmsDeliveryError) as exc_info:
            await delivery.send_manual(CONTACT, "Your car is ready")

        assert exc_info.value.code == "http_error"
        assert repository.list(Message) == []

    @pytest.mark.asyncio
    async def test_not_configured_raises(self, repository, alerts):
        delivery = DeliveryService(None, ConversationStore(repository), alerts)

        with pytest.raises(SmsDeliveryError):
            await delivery.send_manual(CONTACT, "hi")
