from typing import Optional

from pydantic import BaseModel


class SettingsResponse(BaseModel):
    """Dashboard view of the configuration. Secrets only appear as masked previews."""

    openai_configured: bool
    openphone_configured: bool
    business_name: str
    labor_rate: int
    dnd_enabled: bool
    phone_number: Optional[str] = None
    openai_key_preview: Optional[str] = None
    openphone_key_preview: Optional[str] = None
