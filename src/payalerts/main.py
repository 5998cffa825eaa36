from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from payalerts.api.deps import Services, build_services
from payalerts.api.v1.routers.health import router as health_router
from payalerts.api.v1.routers.mollie import router as mollie_router
from payalerts.api.v1.routers.razorpay import router as razorpay_router
from payalerts.core.config import Settings, settings as default_settings
from payalerts.core.errors import GatewayError, ValidationError
from payalerts.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _error_body(exc: Exception) -> dict:
    body: dict = {"error": str(exc)}
    details = getattr(exc, "details", None)
    if details is not None:
        body["details"] = details
    return body


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    settings = settings or (services.settings if services else default_settings)
    configure_logging(settings.log_level)

    app = FastAPI(title="PayAlerts", version="0.1.0")
    app.state.services = services or build_services(settings)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(mollie_router, prefix="/api/v1")
    app.include_router(razorpay_router, prefix="/api/v1")

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(_error_body(exc), status_code=400)

    # checkout 흐름의 게이트웨이 실패는 400 (webhook 쪽은 핸들러가 직접 500 처리)
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error("❌ Gateway error on %s: %s", request.url.path, exc)
        return JSONResponse(_error_body(exc), status_code=400)

    @app.on_event("startup")
    def validate_settings() -> None:
        if settings.env == "production" and not settings.mollie_api_key:
            raise RuntimeError("MOLLIE_API_KEY is missing. Check your .env file.")
        if not settings.telegram_configured:
            logger.warning("Telegram is not configured, notifications will be skipped")

    @app.on_event("shutdown")
    async def cancel_followups() -> None:
        await app.state.services.followups.shutdown()

    return app


app = create_app()
