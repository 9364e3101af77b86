"""Data Masking Endpoints"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from typing import List
import structlog

from src.api.routes.rules import rule_service
from src.models.masking import (
    BatchMaskingRequest,
    BatchMaskingResponse,
    MaskingRequest,
    MaskingResponse,
    MaskingStrategy,
    PiiType
)
from src.services.masking_service import MaskingService
from src.utils.config import settings

router = APIRouter()
logger = structlog.get_logger()

masking_service = MaskingService(rule_service=rule_service)


@router.post("/mask", response_model=MaskingResponse)
async def mask_data(request: MaskingRequest):
    """
    Mask a single PII value

    Options left unset are taken from the active rule of the PII type.
    Returns 400 with the response body when masking fails.
    """
    logger.info("mask_request_received", pii_type=request.pii_type.value)

    response = await masking_service.mask_with_rules(request)

    if not response.success:
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))
    return response


@router.post("/mask/batch", response_model=BatchMaskingResponse)
async def mask_batch(request: BatchMaskingRequest):
    """Mask several values; each item succeeds or fails on its own"""
    if len(request.items) > settings.MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Batch size exceeds maximum of {settings.MAX_BATCH_SIZE}"
        )

    return await masking_service.mask_batch(request)


@router.get("/pii-types", response_model=List[str])
async def get_pii_types():
    """Get supported PII types"""
    return [pii_type.value for pii_type in PiiType]


@router.get("/strategies", response_model=List[str])
async def get_masking_strategies():
    """Get supported masking strategies"""
    return [strategy.value for strategy in MaskingStrategy]


@router.get("/health")
async def health_check():
    return {
        "status": "UP",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
