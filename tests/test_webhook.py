import asyncio
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from shopsense.main import create_app
from shopsense.models import Message
from shopsense.services.container import build_services

CONTACT = "+15557654321"


def openphone_event(direction="incoming", body="Need an oil change", sender=CONTACT, object_type="message"):
    return {
        "id": "EVc67ec998b35c41d388af50799aeeba3e",
        "object": "event",
        "type": "message.received",
        "data": {
            "object": {
                "id": "AC24a8b8321c4f4cf2be110f4250793d51",
                "object": object_type,
                "from": sender,
                "to": ["+15550001111"],
                "direction": direction,
                "body": body,
                "status": "received",
                "phoneNumberId": "PNkAboSWjm",
                "conversationId": "CNce2e2e73de4a489ca38ed6e948818572",
                "createdAt": "2024-05-15T12:00:00.000Z",
            }
        },
    }


@pytest.fixture
def client(services):
    return TestClient(create_app(services=services))


class TestOpenPhoneWebhook:
    def test_incoming_message_is_processed(self, client, services, sms):
        response = client.post("/api/webhooks/openphone", json=openphone_event())

        assert response.status_code == 200
        assert response.json() == {"received": True, "processed": True}
        sms.send_sms.assert_awaited_once()
        assert services.repository.list(Message)[0].body == "Need an oil change"

    def test_phone_number_id_is_captured(self, client, sms):
        client.post("/api/webhooks/openphone", json=openphone_event())

        sms.set_phone_number_id.assert_called_with("PNkAboSWjm")

    def test_alias_path(self, client):
        response = client.post("/webhooks/openphone", json=openphone_event())

        assert response.status_code == 200
        assert response.json()["processed"] is True

    def test_outgoing_echo_is_ignored(self, client, services):
        response = client.post("/api/webhooks/openphone", json=openphone_event(direction="outgoing"))

        assert response.status_code == 200
        assert response.json() == {"received": True, "processed": False}
        assert services.repository.list(Message) == []

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            [],
            "just a string",
            42,
            None,
            {"object": "event"},
            {"object": "event", "data": {}},
            {"object": "event", "data": {"object": "not-an-object"}},
            {"object": "something-else", "data": {"object": {"object": "message"}}},
            {"object": "event", "data": {"object": {"object": "call", "direction": "incoming"}}},
        ],
    )
    def test_any_json_payload_is_acknowledged(self, client, payload):
        response = client.post("/api/webhooks/openphone", json=payload)

        assert response.status_code == 200
        assert response.json() == {"received": True, "processed": False}

    def test_missing_sender_or_body_is_acknowledged(self, client, services):
        for event in (openphone_event(sender=None), openphone_event(body="")):
            response = client.post("/api/webhooks/openphone", json=event)

            assert response.status_code == 200
            assert response.json()["processed"] is False
        assert services.repository.list(Message) == []

    def test_empty_body_is_acknowledged(self, client):
        response = client.post("/api/webhooks/openphone", content=b"")

        assert response.status_code == 200
        assert response.json()["received"] is True

    def test_non_json_body_is_rejected(self, client):
        response = client.post(
            "/api/webhooks/openphone",
            content=b"this is not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_dnd_disabled_acknowledges_without_processing(self, make_settings, repository, provider, sms):
        services = build_services(make_settings(dnd_enabled=False), repository=repository, provider=provider, sms=sms)
        client = TestClient(create_app(services=services))

        response = client.post("/api/webhooks/openphone", json=openphone_event())

        assert response.status_code == 200
        assert response.json() == {"received": True, "processed": False}
        assert len(repository.list(Message)) == 1
        sms.send_sms.assert_not_awaited()

    def test_pipeline_crash_still_returns_200(self, client, services):
        services.pipeline.customers.record_interaction = Mock(side_effect=ZeroDivisionError("division by zero"))

        response = client.post("/api/webhooks/openphone", json=openphone_event())

        assert response.status_code == 200
        assert response.json()["processed"] is False

    def test_slow_processing_is_cut_off_and_acknowledged(self, make_settings, repository, provider, sms):
        services = build_services(
            make_settings(webhook_processing_timeout_seconds=0.05), repository=repository, provider=provider, sms=sms
        )

        async def slow_generate(*args, **kwargs):
            await asyncio.sleep(5)

        provider.generate.side_effect = slow_generate
        client = TestClient(create_app(services=services))

        response = client.post("/api/webhooks/openphone", json=openphone_event())

        assert response.status_code == 200
        assert response.json() == {"received": True, "processed": False}
        assert len(repository.list(Message)) == 1
        sms.send_sms.assert_not_awaited()

    def test_probe(self, client):
        response = client.get("/api/webhooks/openphone")

        assert response.status_code == 200
        assert response.json()["method"] == "POST"
