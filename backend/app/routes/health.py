"""
MindScribe Backend — Health Check Route
=========================================

What:  Liveness probe for load balancers and the mobile client.
How:   Answers without touching Gemini or Firebase, so it stays up even when
       an upstream is down.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.note import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        message="MindScribe API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
