from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1 import irradiance, reports, sizing
from app.core.logging import RequestLoggingMiddleware, setup_logging


def create_app() -> FastAPI:
    setup_logging(json_format=settings.json_logs, debug=settings.debug)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(
        irradiance.router, prefix="/api/v1/irradiance", tags=["irradiance"]
    )
    application.include_router(sizing.router, prefix="/api/v1/sizing", tags=["sizing"])
    application.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])

    @application.get("/health")
    async def health_check() -> dict:
        return {
            "status": "ok",
            "app": settings.app_name,
            "environment": settings.environment,
        }

    return application


app = create_app()
