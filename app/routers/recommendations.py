"""API endpoints for AI-powered activity recommendations."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.models.schemas import Activity, NormalizeRequest, PromptResponse, Recommendation
from app.services.activity_ai_service import ActivityAIService
from app.services.llm_client import UpstreamRequestError
from app.services.prompt_builder import build_activity_prompt
from app.services.response_normalizer import ResponseNormalizer


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


def get_activity_service() -> ActivityAIService:
    """Build the service per request so settings changes are picked up."""
    return ActivityAIService()


@router.post("/generate", response_model=Recommendation)
async def generate_recommendation(
    activity: Activity,
    service: Annotated[ActivityAIService, Depends(get_activity_service)],
):
    """
    Analyze an activity with the text-generation upstream.

    Always returns a recommendation when the upstream answers, falling back
    to generic advice if its answer cannot be interpreted.

    Returns:
        Recommendation: analysis text, improvements, suggestions and safety notes
    """

    logger.info("Handling recommendation request for activity %s", activity.id)
    try:
        return await run_in_threadpool(service.generate_recommendation, activity)
    except UpstreamRequestError as e:
        raise HTTPException(
            status_code=502,
            detail=f"Upstream analysis request failed: {str(e)}",
        )
    except Exception as e:
        logger.exception("Failed to generate recommendation for activity %s", activity.id)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate recommendation: {str(e)}",
        )


@router.post("/prompt", response_model=PromptResponse)
async def preview_prompt(activity: Activity) -> PromptResponse:
    """Return the exact instruction that would be sent for ``activity``."""
    return PromptResponse(prompt=build_activity_prompt(activity))


@router.post("/normalize", response_model=Recommendation)
async def normalize_response(request: NormalizeRequest):
    """Replay a captured upstream response body through the normalizer."""
    outcome = ResponseNormalizer().normalize_with_outcome(request.activity, request.raw_response)
    logger.info(
        "Replayed response for activity %s | envelope=%s failure=%s",
        request.activity.id,
        outcome.envelope,
        outcome.failure.value if outcome.failure else None,
    )
    return outcome.recommendation
