from fastapi import APIRouter, Depends

from shopsense.config import mask_secret
from shopsense.dependencies import get_services
from shopsense.schemas.settings import SettingsResponse
from shopsense.services.container import ShopServices

router = APIRouter(prefix="/api")


@router.get("/settings", response_model=SettingsResponse)
async def get_shop_settings(services: ShopServices = Depends(get_services)):
    settings = services.settings
    return SettingsResponse(
        openai_configured=settings.openai_configured,
        openphone_configured=settings.openphone_configured,
        business_name=settings.business_name,
        labor_rate=settings.labor_rate,
        dnd_enabled=settings.dnd_enabled,
        phone_number=settings.openphone_phone_number,
        openai_key_preview=mask_secret(settings.openai_api_key),
        openphone_key_preview=mask_secret(settings.openphone_api_key),
    )
