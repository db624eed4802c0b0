"""
MindScribe Backend — Abstract AI Service Interface
====================================================

What:  Contract for the three AI capabilities the routes depend on.
How:   `GeminiService` implements it; tests substitute mocks built with
       `spec=AIService` so the routes never see a real provider.
"""

from abc import ABC, abstractmethod


class AIService(ABC):
    """
    Transcription, summarization and speech synthesis.

    Contract:
        - Each method performs exactly one upstream call (no retries)
        - Every provider failure or malformed response raises UpstreamError
        - Return values are never None
    """

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """
        Convert recorded speech to text.

        Args:
            audio:     Raw audio bytes as uploaded.
            mime_type: MIME type derived from the upload's extension.

        Returns:
            The transcript text.

        Raises:
            UpstreamError: Provider call failed or the response had no text.
        """
        ...

    @abstractmethod
    async def summarize(self, transcript: str) -> str:
        """Rewrite a transcript as a short, bullet-pointed summary."""
        ...

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """
        Render text as MP3 speech.

        Returns:
            Decoded MP3 bytes.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the implementation."""
        return None
