"""OpenPhone SMS client."""

from typing import Optional

import httpx

from shopsense.logging_config import get_logger
from shopsense.services.result import Result

logger = get_logger("openphone_service")

DEFAULT_API_URL = "https://api.openphone.com/v1"
AUTH_REJECTED_STATUSES = (401, 403)


class SmsDeliveryError(Exception):
    """Outbound SMS could not be delivered."""

    def __init__(self, message: str, code: str = "unknown"):
        super().__init__(message)
        self.code = code


def auth_header_variants(api_key: str) -> list[tuple[str, dict]]:
    """Auth header shapes accepted by OpenPhone, in the order they are tried."""
    return [
        ("raw", {"Authorization": api_key}),
        ("bearer", {"Authorization": f"Bearer {api_key}"}),
        ("x-api-key", {"X-API-Key": api_key}),
    ]


class OpenPhoneService:
    def __init__(
        self,
        api_key: str,
        phone_number: str,
        base_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
    ):
        self.api_key = api_key
        self.phone_number = phone_number
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.phone_number_id: Optional[str] = None
        self._working_variant: Optional[str] = None

    def set_phone_number_id(self, phone_number_id: Optional[str]) -> None:
        """Remember the provider's phone number id from webhook payloads."""
        if phone_number_id and phone_number_id != self.phone_number_id:
            self.phone_number_id = phone_number_id
            logger.info("Updated phoneNumberId", extra={"context": {"phone_number_id": phone_number_id}})

    def _ordered_variants(self) -> list[tuple[str, dict]]:
        variants = auth_header_variants(self.api_key)
        if self._working_variant is None:
            return variants
        return sorted(variants, key=lambda variant: variant[0] != self._working_variant)

    async def send_sms(self, to: str, content: str) -> Result[dict]:
        """Send one SMS.

        Auth header variants are tried in order; a 401/403 moves on to the
        next one, any other error status ends the attempt.
        """
        payload = {"content": content, "from": self.phone_number, "to": [to]}
        url = f"{self.base_url}/messages"
        last_error = "No auth variant accepted"
        last_status = None
        attempts = 0

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                for name, auth_headers in self._ordered_variants():
                    headers = {"Content-Type": "application/json", **auth_headers}
                    response = await client.post(url, headers=headers, json=payload)
                    attempts += 1
                    last_status = response.status_code

                    if 200 <= response.status_code < 300:
                        self._working_variant = name
                        logger.info(
                            "SMS sent",
                            extra={"context": {"to": to, "status": response.status_code, "auth_variant": name}},
                        )
                        try:
                            body = response.json()
                        except ValueError:
                            body = {}
                        return Result.success(
                            body if isinstance(body, dict) else {"data": body},
                            status_code=response.status_code,
                            attempts=attempts,
                        )

                    if response.status_code in AUTH_REJECTED_STATUSES:
                        last_error = f"OpenPhone rejected auth variant {name}: {response.status_code}"
                        logger.warning(last_error)
                        continue

                    logger.error(f"OpenPhone error: {response.status_code} - {response.text[:500]}")
                    return Result.failure(
                        f"OpenPhone API error: {response.status_code}",
                        "http_error",
                        status_code=response.status_code,
                        attempts=attempts,
                    )
        except httpx.HTTPError as e:
            logger.error(f"OpenPhone transport error: {type(e).__name__}: {e}")
            return Result.failure(f"OpenPhone transport error: {e}", "transport_error", attempts=attempts + 1)

        return Result.failure(last_error, "auth_rejected", status_code=last_status, attempts=attempts)
