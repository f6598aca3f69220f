"""Health check endpoints."""

from typing import Dict

from fastapi import APIRouter

from ...infrastructure.dependencies import get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, object]:
    """Check the health of all service components.

    Returns:
        Availability of evidence providers and AI judges, plus the number
        of registered sources
    """
    container = get_service_container()

    provider_status = {
        name.title(): is_active
        for name, is_active in container.provider_factory.available_providers.items()
    }
    judge_status = {
        name.title(): is_active
        for name, is_active in container.ai_factory.available_judges.items()
    }

    return {
        "status": "healthy",
        "evidence_providers": provider_status,
        "ai_judges": judge_status,
        "registered_sources": len(container.get_source_registry()),
    }
