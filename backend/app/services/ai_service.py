"""
MindScribe Backend — Google AI Service Implementation
======================================================

What:  Concrete AIService backed by Google Gemini (transcription, summarization)
       and Google Cloud Text-to-Speech (speech synthesis).
How:   Gemini calls go through the google-generativeai SDK with inline audio
       data; Text-to-Speech is a single JSON POST made with httpx. Responses
       are checked field by field, and any failure becomes an UpstreamError
       carrying the provider's message.
Who:   Built once in the app lifespan from Settings; handed to routes through
       `get_ai_service`.

Failure policy:
    Every call is attempted exactly once. There is no retry, backoff or
    circuit breaker; the route lets the UpstreamError reach the exception
    handlers.
"""

import base64
import binascii
import logging
import time
import uuid
from typing import Any, Optional

import google.generativeai as genai
import httpx
from google.api_core import exceptions as google_exceptions

from app.config import Settings
from app.exceptions import UpstreamError
from app.services.ai_base import AIService

logger = logging.getLogger(__name__)

TTS_ACCESS_NOTE = "Note: This requires Google Cloud Text-to-Speech API access."

# Fixed voice for every synthesized summary.
TTS_VOICE = {
    "languageCode": "en-US",
    "name": "en-US-Neural2-D",
    "ssmlGender": "NEUTRAL",
}
TTS_AUDIO_CONFIG = {
    "audioEncoding": "MP3",
    "speakingRate": 0.9,
    "pitch": 0,
}


def _status_of(error: Exception) -> Optional[int]:
    """HTTP status reported by a google-api-core error, if any."""
    code = getattr(error, "code", None)
    return code if isinstance(code, int) else None


def _message_of(error: Exception) -> str:
    message = getattr(error, "message", None)
    return message if isinstance(message, str) and message else str(error)


def _http_error_message(response: httpx.Response) -> str:
    """Extract `error.message` from a Google REST error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.text or response.reason_phrase


class GeminiService(AIService):
    """
    Google-backed implementation of transcription, summarization and TTS.

    Credentials are per capability: `gemini_api_key` configures the Gemini
    SDK, `google_tts_api_key` is sent only to the Text-to-Speech endpoint.
    """

    TRANSCRIBE_PROMPT = (
        "Transcribe the speech in this audio recording verbatim. "
        "Return only the transcript text."
    )

    SUMMARIZE_PROMPT = """Simplify and summarize this transcript for a neurodiverse student. Use short sentences and bullet points. Make it easy to read and understand.

Transcript:
{transcript}

Provide a clear, simplified summary:"""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            settings:    Application settings (API keys, model names, endpoint).
            http_client: Client used for Text-to-Speech calls. Tests pass one
                         built on httpx.MockTransport; otherwise one is created
                         and closed by `aclose()`.
        """
        # The Gemini SDK keeps its API key in module-level state.
        if settings.gemini_api_key:
            genai.configure(api_key=settings.gemini_api_key)

        self.transcribe_model = genai.GenerativeModel(settings.gemini_transcribe_model)
        self.summarize_model = genai.GenerativeModel(settings.gemini_summarize_model)

        self.tts_api_key = settings.google_tts_api_key
        self.tts_endpoint = settings.tts_endpoint
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient()

        logger.info(
            "GeminiService initialized with transcribe_model=%s, summarize_model=%s, tts=%s",
            settings.gemini_transcribe_model,
            settings.gemini_summarize_model,
            "enabled" if self.tts_api_key else "disabled",
        )

    # ── Gemini ────────────────────────────────────────────────────────────

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        logger.info(
            "[%s] Transcribing %d bytes of %s with Gemini", request_id, len(audio), mime_type
        )

        # The SDK base64-encodes inline blobs on the wire.
        contents = [
            self.TRANSCRIBE_PROMPT,
            {"mime_type": mime_type, "data": audio},
        ]
        try:
            response = await self.transcribe_model.generate_content_async(contents)
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[%s] Transcription error: %s", request_id, _message_of(e))
            raise UpstreamError(
                message=f"Transcription failed: {_message_of(e)}",
                status_code=_status_of(e),
                context={"request_id": request_id},
            ) from e
        except Exception as e:
            logger.error("[%s] Transcription error: %s", request_id, str(e))
            raise UpstreamError(
                message=f"Transcription failed: {e}",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        transcript = self._first_part_text(response, "Transcription")
        logger.info(
            "[%s] Transcription completed in %.0fms, %d chars",
            request_id,
            (time.time() - start_time) * 1000,
            len(transcript),
        )
        return transcript

    async def summarize(self, transcript: str) -> str:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        logger.info("[%s] Summarizing %d chars with Gemini", request_id, len(transcript))

        prompt = self.SUMMARIZE_PROMPT.format(transcript=transcript)
        try:
            response = await self.summarize_model.generate_content_async(prompt)
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[%s] Summarization error: %s", request_id, _message_of(e))
            raise UpstreamError(
                message=f"Summarization failed: {_message_of(e)}",
                status_code=_status_of(e),
                context={"request_id": request_id},
            ) from e
        except Exception as e:
            logger.error("[%s] Summarization error: %s", request_id, str(e))
            raise UpstreamError(
                message=f"Summarization failed: {e}",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        summary = self._first_part_text(response, "Summarization")
        logger.info(
            "[%s] Summarization completed in %.0fms, %d chars",
            request_id,
            (time.time() - start_time) * 1000,
            len(summary),
        )
        return summary

    @staticmethod
    def _first_part_text(response: Any, operation: str) -> str:
        """
        Return `candidates[0].content.parts[0].text` from a Gemini response.

        Raises:
            UpstreamError naming the missing piece when the shape is not as expected.
        """
        candidates = getattr(response, "candidates", None)
        if not candidates:
            raise UpstreamError(
                message=f"{operation} failed: unexpected response shape (no candidates)"
            )
        parts = getattr(getattr(candidates[0], "content", None), "parts", None)
        if not parts:
            raise UpstreamError(
                message=f"{operation} failed: unexpected response shape (no content parts)"
            )
        # Proto-plus parts report an unset `text` as "" (e.g. inline_data parts).
        text = getattr(parts[0], "text", None)
        if not isinstance(text, str) or not text:
            raise UpstreamError(
                message=f"{operation} failed: unexpected response shape (no text in first part)"
            )
        return text

    # ── Cloud Text-to-Speech ──────────────────────────────────────────────

    async def synthesize(self, text: str) -> bytes:
        if not self.tts_api_key:
            raise UpstreamError(
                message=f"TTS failed: GOOGLE_TTS_API_KEY is not configured. {TTS_ACCESS_NOTE}",
                status_code=503,
            )

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        logger.info("[%s] Synthesizing speech for %d chars", request_id, len(text))

        payload = {
            "input": {"text": text},
            "voice": TTS_VOICE,
            "audioConfig": TTS_AUDIO_CONFIG,
        }
        try:
            response = await self.http_client.post(
                self.tts_endpoint,
                params={"key": self.tts_api_key},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _http_error_message(e.response)
            logger.error(
                "[%s] TTS error: %d %s", request_id, e.response.status_code, message
            )
            raise UpstreamError(
                message=f"TTS failed: {message}. {TTS_ACCESS_NOTE}",
                status_code=e.response.status_code,
                context={"request_id": request_id},
            ) from e
        except httpx.HTTPError as e:
            logger.error("[%s] TTS error: %s", request_id, str(e))
            raise UpstreamError(
                message=f"TTS failed: {e}. {TTS_ACCESS_NOTE}",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(
                message="TTS failed: unexpected response shape (body is not JSON)"
            ) from e

        audio_content = body.get("audioContent") if isinstance(body, dict) else None
        if not isinstance(audio_content, str) or not audio_content:
            raise UpstreamError(
                message="TTS failed: unexpected response shape (no audioContent)"
            )
        try:
            audio = base64.b64decode(audio_content, validate=True)
        except binascii.Error as e:
            raise UpstreamError(
                message="TTS failed: audioContent is not valid base64"
            ) from e

        logger.info(
            "[%s] TTS completed in %.0fms, %d bytes",
            request_id,
            (time.time() - start_time) * 1000,
            len(audio),
        )
        return audio

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()
