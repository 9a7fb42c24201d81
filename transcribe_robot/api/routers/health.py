"""
Health router for the webhook API
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends

from ..dependencies import get_service_factory, get_webhook_service

router = APIRouter()


@router.get("/health")
async def get_health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": "0.1.0",
    }


@router.get("/status")
async def get_status(
    factory=Depends(get_service_factory),
    webhook_service=Depends(get_webhook_service),
) -> dict[str, Any]:
    """Detailed service status"""
    try:
        stats = await webhook_service.get_processing_stats()
        validation = factory.validate_configuration()

        return {
            "status": "healthy" if validation["valid"] else "degraded",
            "version": "0.1.0",
            "timestamp": datetime.now().isoformat(),
            "configuration": {
                "storage_provider": factory.settings.storage_provider,
                "transcription_provider": factory.settings.transcription_provider,
                "max_delta_pages": factory.settings.max_delta_pages,
                "environment": factory.settings.environment,
            },
            "validation": validation,
            "providers": factory.get_available_providers(),
            "statistics": stats,
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": datetime.now().isoformat(),
        }
