"""Claim verification endpoints."""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.models.verification import VerificationResult
from ...domain.services.fact_checking_service import FactCheckingService
from ...infrastructure.dependencies import get_fact_checking_service, get_service_container

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verify"])


class VerifyRequest(BaseModel):
    """Request model for claim verification."""

    claim: str = Field(..., description="Claim to verify")


@router.post("/verify", response_model=VerificationResult)
async def verify_claim(
    request: VerifyRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> VerificationResult:
    """Verify a single claim.

    Args:
        request: Verification request
        service: Fact checking service

    Returns:
        Verdict with evidence, sources and explanation
    """
    logger.info(f"📥 Verification request: {request.claim[:100]}")
    try:
        return await service.verify_claim(request.claim)
    except Exception as e:
        logger.error(f"❌ Verification failed: {e}")
        raise HTTPException(status_code=500, detail=f"Verification failed: {str(e)}")


@router.post("/sources/reverify")
async def reverify_sources() -> Dict[str, Dict[str, str]]:
    """Re-check every source whose last verification is stale.

    Returns:
        New verification status per re-checked source id
    """
    try:
        updated = await get_service_container().reverify_sources()
    except Exception as e:
        logger.error(f"❌ Source re-verification failed: {e}")
        raise HTTPException(status_code=500, detail=f"Re-verification failed: {str(e)}")
    return {"updated": updated}
