from dataclasses import dataclass
from typing import Optional

from shopsense.config import Settings
from shopsense.database import create_session_factory
from shopsense.logging_config import get_logger
from shopsense.repositories import InMemoryRepository, ShopRepository, SqlRepository
from shopsense.services.action_dispatcher import ActionDispatcher
from shopsense.services.ai_service import ResponseClient
from shopsense.services.alert_service import AlertService
from shopsense.services.appointment_service import AppointmentService
from shopsense.services.conversation_store import ConversationStore
from shopsense.services.customer_service import CustomerService
from shopsense.services.delivery_service import DeliveryService
from shopsense.services.llm import LLMProvider, OpenAIProvider
from shopsense.services.openphone_service import OpenPhoneService
from shopsense.services.pipeline import MessagePipeline
from shopsense.services.quote_service import QuoteService
from shopsense.services.tech_sheet_service import TechSheetService

logger = get_logger("container")


@dataclass
class ShopServices:
    settings: Settings
    repository: ShopRepository
    store: ConversationStore
    customers: CustomerService
    quotes: QuoteService
    appointments: AppointmentService
    tech_sheets: TechSheetService
    alerts: AlertService
    delivery: DeliveryService
    pipeline: MessagePipeline

    def close(self) -> None:
        if isinstance(self.repository, SqlRepository):
            self.repository.close()


def build_repository(settings: Settings) -> ShopRepository:
    if settings.database_url:
        logger.info("Using SQL repository")
        return SqlRepository(create_session_factory(settings.database_url))
    logger.info("DATABASE_URL not set, using in-memory repository")
    return InMemoryRepository()


def log_configuration_warnings(settings: Settings) -> None:
    if not settings.openai_configured:
        logger.warning("OPENAI_API_KEY not configured, replies will use the keyword fallback")
    if not settings.openphone_configured:
        logger.warning("OPENPHONE_API_KEY or OPENPHONE_PHONE_NUMBER not configured, SMS sending disabled")
    if not (settings.alert_bot_token and settings.alert_chat_id):
        logger.warning("ALERT_BOT_TOKEN or ALERT_CHAT_ID not configured, alerts disabled")


def build_services(
    settings: Settings,
    repository: Optional[ShopRepository] = None,
    provider: Optional[LLMProvider] = None,
    sms: Optional[OpenPhoneService] = None,
) -> ShopServices:
    """Wire every service once. Explicit arguments override what settings would build."""
    log_configuration_warnings(settings)

    repository = repository or build_repository(settings)
    if provider is None and settings.openai_configured:
        provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            default_model=settings.openai_model,
            base_url=settings.openai_api_url,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    if sms is None and settings.openphone_configured:
        sms = OpenPhoneService(
            api_key=settings.openphone_api_key,
            phone_number=settings.openphone_phone_number,
            base_url=settings.openphone_api_url,
            timeout_seconds=settings.sms_timeout_seconds,
        )

    alerts = AlertService(settings.alert_bot_token, settings.alert_chat_id)
    store = ConversationStore(repository)
    customers = CustomerService(repository)
    quotes = QuoteService(repository, settings.labor_rate)
    appointments = AppointmentService(repository)
    tech_sheets = TechSheetService(repository, provider)
    delivery = DeliveryService(sms, store, alerts)
    dispatcher = ActionDispatcher(customers, quotes, appointments, tech_sheets, alerts)
    response_client = ResponseClient(provider, settings.business_name, settings.labor_rate)
    pipeline = MessagePipeline(settings, repository, store, customers, response_client, dispatcher, delivery)

    return ShopServices(
        settings=settings,
        repository=repository,
        store=store,
        customers=customers,
        quotes=quotes,
        appointments=appointments,
        tech_sheets=tech_sheets,
        alerts=alerts,
        delivery=delivery,
        pipeline=pipeline,
    )
