"""Alert service for sending operator notifications to Telegram."""

from typing import Optional

import httpx

from shopsense.logging_config import get_logger

logger = get_logger("alert_service")

TELEGRAM_API_URL = "https://api.telegram.org"
LEVEL_EMOJI = {"INFO": "ℹ️", "WARNING": "⚠️", "ERROR": "❌", "CRITICAL": "🔥"}


class AlertService:
    def __init__(self, bot_token: Optional[str] = None, chat_id: Optional[str] = None, timeout_seconds: float = 10.0):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send_alert(self, level: str, message: str, context: Optional[dict] = None) -> bool:
        """Send alert to Telegram.

        Args:
            level: INFO, WARNING, ERROR, CRITICAL
            message: Alert message
            context: Optional context dict

        Returns:
            True if sent successfully
        """
        if not self.configured:
            logger.warning(f"Alert not configured: {level} - {message}")
            return False

        text = f"{LEVEL_EMOJI.get(level, '📢')} *{level}*\n\n{message}"

        if context:
            context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
            text += f"\n\n```\n{context_str}\n```"

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    f"{TELEGRAM_API_URL}/bot{self.bot_token}/sendMessage",
                    json={"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"},
                )
                return response.status_code == 200
        except Exception as e:
            logger.error(f"Failed to send alert: {e}")
            return False

    async def alert_critical(self, message: str, context: Optional[dict] = None) -> bool:
        """Shortcut for CRITICAL level alert."""
        return await self.send_alert("CRITICAL", message, context)

    async def alert_warning(self, message: str, context: Optional[dict] = None) -> bool:
        """Shortcut for WARNING level alert."""
        return await self.send_alert("WARNING", message, context)
