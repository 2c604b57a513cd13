from unittest.mock import AsyncMock, Mock

import pytest

from shopsense.config import Settings
from shopsense.repositories import InMemoryRepository
from shopsense.services.alert_service import AlertService
from shopsense.services.container import build_services
from shopsense.services.llm import LLMResponse
from shopsense.services.result import Result

OPENAI_TEST_KEY = "sk-test-openai-key-1234"
OPENPHONE_TEST_KEY = "op-test-openphone-key-5678"
SHOP_NUMBER = "+15550001111"


def _make_settings(**overrides) -> Settings:
    values = {
        "business_name": "Pink Chicken Speed Shop",
        "labor_rate": 80,
        "openai_api_key": OPENAI_TEST_KEY,
        "openphone_api_key": OPENPHONE_TEST_KEY,
        "openphone_phone_number": SHOP_NUMBER,
        "dnd_enabled": True,
        "database_url": None,
        "alert_bot_token": None,
        "alert_chat_id": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings():
    """Factory for settings that never read the local .env file."""
    return _make_settings


@pytest.fixture
def settings():
    return _make_settings()


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def provider():
    """LLM provider mock; set ``provider.generate.return_value`` per test."""
    mock = Mock()
    mock.generate = AsyncMock(return_value=LLMResponse(content="", model="gpt-4o"))
    return mock


@pytest.fixture
def sms():
    """OpenPhone client mock that accepts every message."""
    mock = Mock()
    mock.send_sms = AsyncMock(return_value=Result.success({"id": "MSG1"}))
    return mock


@pytest.fixture
def alerts():
    mock = Mock(spec=AlertService)
    mock.alert_critical = AsyncMock(return_value=True)
    mock.alert_warning = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def services(settings, repository, provider, sms, alerts):
    built = build_services(settings, repository=repository, provider=provider, sms=sms)
    built.alerts = alerts
    built.delivery.alerts = alerts
    built.pipeline.dispatcher.alerts = alerts
    return built

