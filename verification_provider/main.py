import logging

from fastapi import FastAPI

from verification_provider.api_routers.v1 import api_router
from verification_provider.features.health.routes.health import router as health_router
from verification_provider.platform.config import settings
from verification_provider.platform.exceptions import add_exception_handlers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Verification Provider API",
    description="Issues and validates short-lived email verification codes",
    version="1.0.0",
)


@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": settings.APP_NAME,
        "description": "Email verification codes delivered over a message queue.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api/v1",
    }


add_exception_handlers(app)

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
