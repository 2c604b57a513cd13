from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    phone_number: str = Field(validation_alias=AliasChoices("contact_id", "phone_number"))
    body: str
    direction: str
    timestamp: datetime
    processed: bool
    read: bool
    intent: Optional[str] = Field(default=None, validation_alias=AliasChoices("derived_intent", "intent"))
    action: Optional[str] = Field(default=None, validation_alias=AliasChoices("derived_action", "action"))
    ai_response: Optional[str] = Field(default=None, validation_alias=AliasChoices("ai_reply_text", "ai_response"))


class MessageListResponse(BaseModel):
    messages: list[MessageOut]


class ManualReplyRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, validation_alias=AliasChoices("phoneNumber", "phone_number", "to"))
    message: Optional[str] = Field(default=None, validation_alias=AliasChoices("message", "content", "body"))


class SuccessResponse(BaseModel):
    success: bool = True
    message_id: Optional[str] = None
