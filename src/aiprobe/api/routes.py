"""API Routes.

FastAPI route definitions for aiprobe.
"""
import logging
from fastapi import APIRouter, HTTPException

from aiprobe.api.schemas import (
    AnalyzeRequest, AnalysisReport,
    HealthResponse, PresetInfo, PresetsResponse,
)
from aiprobe.config import FUSION_PRESETS, get_settings
from aiprobe.errors import InvalidInput
from aiprobe.services.detector import get_detector_service


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1", tags=["v1"])


def check_word_limits(text: str) -> None:
    """Enforce the caller-side word limits.

    Raises:
        HTTPException: 400 with a readable message when out of bounds
    """
    settings = get_settings()
    if not text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty or whitespace only")
    words = len(text.split())
    if words < settings.api_min_words:
        raise HTTPException(
            status_code=400,
            detail=f"Text must contain at least {settings.api_min_words} words (got {words})",
        )
    if words > settings.api_max_words:
        raise HTTPException(
            status_code=400,
            detail=f"Text cannot exceed {settings.api_max_words} words (got {words})",
        )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Check system health.

    Returns:
        Health status including oracle connection
    """
    settings = get_settings()
    detector = get_detector_service()

    if detector.oracle is None:
        oracle_status = "disabled"
    elif hasattr(detector.oracle, "check_health"):
        oracle_status = (await detector.oracle.check_health())["status"]
    else:
        oracle_status = "configured"

    return HealthResponse(
        status="degraded" if oracle_status in ("disconnected", "error") else "healthy",
        oracle=oracle_status,
        oracle_backend=settings.oracle_backend if detector.oracle is not None else None,
        language=settings.language,
        preset=settings.fusion_preset,
    )


@router.get("/presets", response_model=PresetsResponse)
async def list_presets():
    """List fusion presets.

    Returns:
        Every preset's analyzer weights and oracle share
    """
    settings = get_settings()
    return PresetsResponse(
        presets=[
            PresetInfo(
                name=name,
                analyzer_weights=preset["analyzer_weights"],
                oracle_share=preset["oracle_share"],
            )
            for name, preset in FUSION_PRESETS.items()
        ],
        active=settings.fusion_preset,
    )


@router.post("/analyze", response_model=AnalysisReport, response_model_by_alias=True)
async def analyze(request: AnalyzeRequest):
    """Estimate the probability that a text is AI-generated.

    Args:
        request: Analyze request with text and optional language

    Returns:
        Analysis report (camelCase keys)

    Raises:
        HTTPException: 400 on invalid input, 500 on processing errors
    """
    check_word_limits(request.text)
    try:
        detector = get_detector_service()
        return await detector.analyze(request.text, request.language)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error in analyze")
        raise HTTPException(status_code=500, detail=str(e))
