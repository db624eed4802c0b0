"""
MindScribe Backend — Text-to-Speech Route Handler
===================================================

What:  POST /api/tts — synthesize speech, store it, return its public URL.
How:   AIService.synthesize() → MP3 bytes → NoteService.upload_audio() under
       `audio/tts_<uuid4>.mp3`. The bytes are not kept after the upload.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies import get_ai_service, get_note_store
from app.schemas.note import ErrorResponse, TTSRequest, TTSResponse
from app.services.ai_base import AIService
from app.services.note_service import NoteService
from app.validators import require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Text-to-Speech"])


def generate_audio_filename() -> str:
    return f"tts_{uuid.uuid4()}.mp3"


@router.post(
    "/tts",
    response_model=TTSResponse,
    responses={
        400: {"description": "Text missing or blank", "model": ErrorResponse},
        500: {"description": "Synthesis or upload failed", "model": ErrorResponse},
    },
    summary="Generate speech audio for a text",
)
async def synthesize_speech(
    payload: Optional[TTSRequest] = None,
    ai_service: AIService = Depends(get_ai_service),
    note_store: NoteService = Depends(get_note_store),
) -> TTSResponse:
    text = require_text(
        payload.text if payload else None,
        field="text",
        missing_message="Text is required",
        empty_message="Text cannot be empty",
    )

    logger.info("Generating TTS for text (%d characters)", len(text))
    audio = await ai_service.synthesize(text)
    audio_url = await note_store.upload_audio(audio, generate_audio_filename())
    return TTSResponse(audio_url=audio_url)
