"""
MindScribe Backend — Transcribe Route Handler
===============================================

What:  POST /api/transcribe — speech-to-text for an uploaded audio file.
How:   Validates the multipart `audio` field, writes it to a temporary file,
       sends the bytes to the AI client, and removes the temporary file on
       every path (success, validation failure, upstream failure).

Request Flow:
    1. Missing `audio` field            → 400 "No audio file provided"
    2. Unsupported type / too large     → 400 (no AI call is made)
    3. Store temp file, read it back, derive MIME type from the extension
    4. AIService.transcribe()           → UpstreamError propagates as-is
    5. finally: cleanup_file() + close the upload
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.dependencies import get_ai_service, get_file_service
from app.exceptions import ValidationError
from app.schemas.note import ErrorResponse, TranscribeResponse
from app.services.ai_base import AIService
from app.services.file_service import FileService, get_mime_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Transcribe"])


@router.post(
    "/transcribe",
    response_model=TranscribeResponse,
    responses={
        400: {"description": "Missing, unsupported or oversized file", "model": ErrorResponse},
        500: {"description": "Transcription failed", "model": ErrorResponse},
    },
    summary="Transcribe an audio file",
    description="Upload an audio file (mp3, wav, m4a, ogg, webm; max 10MB) as field `audio`.",
)
async def transcribe_audio(
    audio: Optional[UploadFile] = File(default=None, description="Audio recording"),
    ai_service: AIService = Depends(get_ai_service),
    file_service: FileService = Depends(get_file_service),
) -> TranscribeResponse:
    temp_path: Optional[str] = None

    try:
        if audio is None:
            raise ValidationError(message="No audio file provided", field="audio")

        filename = audio.filename or "upload"
        # Type check before reading the body so bad uploads are cheap to reject.
        file_service.validate_type(filename, audio.content_type)

        content = await audio.read()
        logger.info("Received audio file: %s (%d bytes)", filename, len(content))
        file_service.validate_size(audio.size, len(content))

        temp_path = await file_service.store_temp_file(content, filename)
        audio_bytes = await file_service.read_file(temp_path)
        mime_type = get_mime_type(filename)

        transcript = await ai_service.transcribe(audio_bytes, mime_type)
        return TranscribeResponse(transcript=transcript)

    finally:
        if temp_path:
            await file_service.cleanup_file(temp_path)
        if audio is not None:
            await audio.close()
