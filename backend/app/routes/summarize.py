"""
MindScribe Backend — Summarize Route Handler
==============================================

What:  POST /api/summarize — turn a transcript into a simplified summary.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies import get_ai_service
from app.schemas.note import ErrorResponse, SummarizeRequest, SummarizeResponse
from app.services.ai_base import AIService
from app.validators import require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Summarize"])


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={
        400: {"description": "Transcript missing or blank", "model": ErrorResponse},
        500: {"description": "Summarization failed", "model": ErrorResponse},
    },
    summary="Simplify and summarize a transcript",
)
async def summarize_transcript(
    payload: Optional[SummarizeRequest] = None,
    ai_service: AIService = Depends(get_ai_service),
) -> SummarizeResponse:
    transcript = require_text(
        payload.transcript if payload else None,
        field="transcript",
        missing_message="Transcript text is required",
        empty_message="Transcript cannot be empty",
    )

    logger.info("Summarizing transcript (%d characters)", len(transcript))
    summary = await ai_service.summarize(transcript)
    return SummarizeResponse(summary=summary)
