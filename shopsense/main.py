from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopsense import __version__
from shopsense.config import Settings, get_settings
from shopsense.logging_config import get_logger, setup_logging
from shopsense.routers import messages, records, settings, webhook
from shopsense.services.container import ShopServices, build_services

logger = get_logger("main")

TAGLINE = "Instant quotes. Automated booking. More wrench time."


def create_app(app_settings: Optional[Settings] = None, services: Optional[ShopServices] = None) -> FastAPI:
    app_settings = app_settings or (services.settings if services else get_settings())
    setup_logging(
        app_settings.log_level,
        secrets=(app_settings.openai_api_key, app_settings.openphone_api_key, app_settings.alert_bot_token),
    )

    app = FastAPI(
        title="ShopSense API",
        description="SMS auto-responder for an automotive repair shop",
        version=__version__,
    )
    app.state.services = services or build_services(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(webhook.router)
    app.include_router(messages.router)
    app.include_router(records.router)
    app.include_router(settings.router)

    @app.on_event("shutdown")
    async def close_services() -> None:
        app.state.services.close()
        logger.info("Services closed")

    @app.get("/health")
    async def health():
        current = app.state.services.settings
        return {
            "status": "ok",
            "version": __version__,
            "dnd_enabled": current.dnd_enabled,
            "openai_configured": current.openai_configured,
            "openphone_configured": current.openphone_configured,
        }

    @app.get("/")
    async def root():
        return {
            "name": "ShopSense",
            "version": __version__,
            "status": "running",
            "tagline": TAGLINE,
            "endpoints": {
                "health": "/health",
                "webhook": webhook.WEBHOOK_PATH,
                "messages": "/api/messages",
                "customers": "/api/customers",
                "quotes": "/api/quotes",
                "appointments": "/api/appointments",
                "techSheets": "/api/tech-sheets",
                "settings": "/api/settings",
                "techSheet": "/api/generate-tech-sheet",
            },
        }

    logger.info(
        "ShopSense API initialized",
        extra={"context": {"business_name": app_settings.business_name, "dnd_enabled": app_settings.dnd_enabled}},
    )
    return app


app = create_app()
