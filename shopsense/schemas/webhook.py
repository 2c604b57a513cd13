from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class OpenPhoneMessageObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    object: Optional[str] = None
    direction: Optional[str] = None
    from_number: Optional[str] = Field(default=None, validation_alias=AliasChoices("from", "from_number"))
    to: Optional[Any] = None
    body: Optional[str] = Field(default=None, validation_alias=AliasChoices("body", "text", "content"))
    phoneNumberId: Optional[str] = Field(default=None, validation_alias=AliasChoices("phoneNumberId", "phone_number_id"))
    conversationId: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("conversationId", "conversation_id"),
    )
    createdAt: Optional[str] = None


class OpenPhoneEventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object: Optional[OpenPhoneMessageObject] = None


class OpenPhoneWebhookPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    object: Optional[str] = None
    type: Optional[str] = None
    data: Optional[OpenPhoneEventData] = None


class WebhookAck(BaseModel):
    received: bool = True
    processed: bool = False
