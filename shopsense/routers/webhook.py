import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from shopsense.dependencies import get_services
from shopsense.logging_config import get_logger
from shopsense.schemas.webhook import OpenPhoneWebhookPayload, WebhookAck
from shopsense.services.container import ShopServices

logger = get_logger("webhook")

router = APIRouter()

WEBHOOK_PATH = "/api/webhooks/openphone"
WEBHOOK_ALIAS_PATH = "/webhooks/openphone"


async def _read_payload(request: Request):
    """Return the decoded JSON body, ``None`` for an empty body, or raise 400 for non-JSON."""
    try:
        raw = await request.body()
    except ClientDisconnect:
        logger.info("Webhook client disconnected during body read")
        return None
    if not raw or not raw.strip():
        logger.info("Webhook probe with empty body")
        return None
    try:
        return await request.json()
    except ValueError as exc:
        logger.warning(
            "Webhook payload is not valid JSON",
            extra={"context": {"error": str(exc), "body_preview": raw[:200].decode("utf-8", "ignore")}},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")


async def _handle_openphone_event(request: Request, services: ShopServices) -> WebhookAck:
    payload = await _read_payload(request)
    if payload is None:
        return WebhookAck(processed=False)

    if not isinstance(payload, dict):
        logger.info("Webhook payload is not an object, ignoring")
        return WebhookAck(processed=False)

    try:
        event = OpenPhoneWebhookPayload.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Webhook payload failed validation", extra={"context": {"errors": exc.errors()[:5]}})
        return WebhookAck(processed=False)

    message = event.data.object if event.data else None
    if event.object != "event" or message is None:
        logger.info("Not a message event, ignoring", extra={"context": {"type": event.type}})
        return WebhookAck(processed=False)

    if message.object != "message":
        logger.info("Not a message object, ignoring", extra={"context": {"object": message.object}})
        return WebhookAck(processed=False)

    if message.direction != "incoming":
        logger.info("Outgoing message echo, ignoring", extra={"context": {"message_id": message.id}})
        return WebhookAck(processed=False)

    if not message.from_number or not message.body:
        logger.warning(
            "Incoming message missing sender or body",
            extra={"context": {"message_id": message.id, "has_from": bool(message.from_number)}},
        )
        return WebhookAck(processed=False)

    services.pipeline.capture_phone_number_id(message.phoneNumberId)
    logger.info(
        "Incoming SMS",
        extra={
            "context": {
                "contact_id": message.from_number,
                "phone_number_id": message.phoneNumberId,
                "conversation_id": message.conversationId,
            }
        },
    )
    timeout = services.settings.webhook_processing_timeout_seconds
    try:
        processed = await asyncio.wait_for(
            services.pipeline.process_inbound(message.from_number, message.body),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.error(
            "Webhook processing timed out, manual response may be required",
            extra={"context": {"contact_id": message.from_number, "timeout_seconds": timeout}},
        )
        processed = False
    return WebhookAck(processed=processed)


@router.post(WEBHOOK_PATH, response_model=WebhookAck)
async def handle_openphone_webhook(request: Request, services: ShopServices = Depends(get_services)):
    """OpenPhone message webhook. Acknowledges every JSON payload with 200."""
    return await _handle_openphone_event(request, services)


@router.post(WEBHOOK_ALIAS_PATH, response_model=WebhookAck)
async def handle_openphone_webhook_alias(request: Request, services: ShopServices = Depends(get_services)):
    logger.info(f"Webhook received at {WEBHOOK_ALIAS_PATH}")
    return await _handle_openphone_event(request, services)


@router.get(WEBHOOK_PATH)
async def openphone_webhook_probe():
    """Liveness probe for the OpenPhone console; real webhooks must use POST."""
    return {
        "message": "OpenPhone webhook endpoint is active",
        "method": "POST",
        "url": WEBHOOK_PATH,
        "server": "ShopSense",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
