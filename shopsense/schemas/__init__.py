from shopsense.schemas.message import ManualReplyRequest, MessageListResponse, MessageOut, SuccessResponse
from shopsense.schemas.records import (
    AppointmentListResponse,
    AppointmentOut,
    CustomerListResponse,
    CustomerOut,
    QuoteListResponse,
    QuoteOut,
)
from shopsense.schemas.settings import SettingsResponse
from shopsense.schemas.tech_sheet import TechSheetListResponse, TechSheetOut, TechSheetRequest
from shopsense.schemas.webhook import OpenPhoneWebhookPayload, WebhookAck

__all__ = [
    "MessageOut",
    "MessageListResponse",
    "ManualReplyRequest",
    "SuccessResponse",
    "CustomerOut",
    "CustomerListResponse",
    "QuoteOut",
    "QuoteListResponse",
    "AppointmentOut",
    "AppointmentListResponse",
    "SettingsResponse",
    "TechSheetRequest",
    "TechSheetOut",
    "TechSheetListResponse",
    "OpenPhoneWebhookPayload",
    "WebhookAck",
]
