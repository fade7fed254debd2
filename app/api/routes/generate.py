from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from app.api.dependencies import get_visualization_service
from app.core.identity import UserIdentity, remember_user, resolve_user
from app.core.rate_limit import build_rate_limit_headers
from app.schemas.generation import GenerationRequest, GenerationResponse, RateLimitedResponse
from app.services.rate_limiter import RateLimitResult
from app.services.visualization_service import VisualizationService

router = APIRouter(tags=["Generation"])


@router.post("/generate", response_model=GenerationResponse)
async def generate_visualization(
    body: GenerationRequest,
    response: Response,
    identity: UserIdentity = Depends(resolve_user),
    service: VisualizationService = Depends(get_visualization_service),
):
    """Render the uploaded sofa re-covered in the chosen fabric.

    Returns:
        GenerationResponse with the result URL and remaining daily quota.

    Raises:
        HTTPException: 404 if the fabric does not exist. Throttled callers get
            429 with ``resetAt`` and ``remainingGenerations: 0``.
    """
    outcome = await service.generate(identity.user_id, body.sofa_image_url, body.fabric_id)

    if outcome.status == "rate_limited":
        throttled = RateLimitResult(
            allowed=False,
            remaining=0,
            reset_at=outcome.reset_at,
            limit=service.rate_limiter.daily_limit,
        )
        return JSONResponse(
            status_code=429,
            content=RateLimitedResponse(reset_at=outcome.reset_at).model_dump(mode="json", by_alias=True),
            headers=build_rate_limit_headers(throttled),
        )

    if outcome.status == "fabric_not_found":
        raise HTTPException(status_code=404, detail="Fabric not found")

    remember_user(response, identity)
    return GenerationResponse(
        success=True,
        result_image_url=outcome.result_image_url,
        remaining_generations=outcome.remaining_generations,
    )
