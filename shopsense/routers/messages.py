from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from shopsense.dependencies import get_services
from shopsense.logging_config import get_logger
from shopsense.schemas.message import ManualReplyRequest, MessageListResponse, MessageOut, SuccessResponse
from shopsense.services.container import ShopServices
from shopsense.services.openphone_service import SmsDeliveryError

logger = get_logger("messages")

router = APIRouter(prefix="/api")


@router.get("/messages", response_model=MessageListResponse)
async def list_messages(
    limit: Optional[int] = Query(default=None, ge=1),
    services: ShopServices = Depends(get_services),
):
    """All messages, newest first."""
    messages = services.store.all(limit)
    logger.debug(f"Returning {len(messages)} messages")
    return MessageListResponse(messages=[MessageOut.model_validate(message) for message in messages])


@router.post("/messages/{message_id}/read", response_model=SuccessResponse)
async def mark_message_read(message_id: str, services: ShopServices = Depends(get_services)):
    if not services.store.mark_read(message_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return SuccessResponse(message_id=message_id)


@router.post("/messages/reply", response_model=SuccessResponse)
async def send_manual_reply(payload: ManualReplyRequest, services: ShopServices = Depends(get_services)):
    """Operator reply sent through OpenPhone and recorded in the conversation."""
    phone_number = (payload.phone_number or "").strip()
    text = (payload.message or "").strip()
    if not phone_number or not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Phone number and message are required",
        )

    if not services.delivery.configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="SMS provider not configured")

    try:
        message = await services.delivery.send_manual(phone_number, text)
    except SmsDeliveryError as e:
        logger.error(
            "Manual reply failed",
            extra={"context": {"contact_id": phone_number, "error": str(e), "code": e.code}},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send reply")

    return SuccessResponse(message_id=message.id)
