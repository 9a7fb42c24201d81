"""
Webhook API FastAPI Application
"""

from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.logging import configure_logging, get_logger
from .dependencies import get_service_factory, get_settings
from .routers import health_router, subscriptions_router, webhooks_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.service_name)
    logger.info(f"Starting {settings.service_name}")

    factory = get_service_factory()
    validation = factory.validate_configuration()

    if not validation["valid"]:
        logger.warning("Configuration validation failed (some providers may be unavailable)")
        for error in validation["errors"]:
            logger.warning(f"  - {error}")
    else:
        logger.info("Webhook API initialized successfully")

    yield

    logger.info(f"Shutting down {settings.service_name}")


app = FastAPI(
    title="Transcribe Robot",
    description="""Transcribes audio files dropped into subscribed drives.

Features:
- Change notification endpoint with subscription validation handshake
- Incremental change feed walking per subscription
- Language metadata and transcript written back to each file
- Subscription record administration""",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(webhooks_router, prefix="/webhooks", tags=["webhooks"])
app.include_router(subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}", exc_info=exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
            "timestamp": datetime.now().isoformat(),
        },
    )


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "transcribe_robot.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
