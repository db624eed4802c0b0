"""
MindScribe Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the JSON contract with the mobile client.
How:   Request models keep every field optional so the route can answer
       missing fields with the exact 400 message the client expects. Response
       models use camelCase aliases (`userId`, `audioUrl`) on the wire; FastAPI
       serializes response models by alias.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SummarizeRequest(BaseModel):
    transcript: Optional[str] = Field(default=None, description="Transcript to simplify")


class TTSRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="Text to read aloud")


class SaveNoteRequest(BaseModel):
    """
    Body of POST /api/saveNote.

    `transcript` is optional and stored as "" when omitted or null.
    """
    user_id: Optional[str] = Field(default=None, alias="userId")
    summary: Optional[str] = None
    transcript: Optional[str] = None

    model_config = {"populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    A stored note.

    Fields:
        id:         Firestore document id
        created_at: ISO-8601 time the API received the save request
        timestamp:  Firestore server timestamp; null in the save response
                    because the store assigns it after the write
    """
    id: str = Field(description="Store-assigned note identifier")
    user_id: str = Field(alias="userId")
    summary: str
    transcript: str = ""
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    timestamp: Optional[datetime] = Field(default=None)

    model_config = {"populate_by_name": True}


class TranscribeResponse(BaseModel):
    success: bool = True
    transcript: str


class SummarizeResponse(BaseModel):
    success: bool = True
    summary: str


class TTSResponse(BaseModel):
    success: bool = True
    audio_url: str = Field(alias="audioUrl", description="Public URL of the MP3")

    model_config = {"populate_by_name": True}


class SaveNoteResponse(BaseModel):
    success: bool = True
    status: str = "saved"
    note: NoteResponse


class NoteListResponse(BaseModel):
    """
    Notes for one user, newest first. `count` equals len(notes); there is
    no pagination.
    """
    success: bool = True
    notes: List[NoteResponse]
    count: int


class HealthResponse(BaseModel):
    success: bool = True
    message: str = "MindScribe API is running"
    timestamp: str = Field(description="Current server time (UTC ISO 8601)")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    message: str
    stack: Optional[str] = Field(
        default=None, description="Traceback, only when ENVIRONMENT=development"
    )


class ErrorResponse(BaseModel):
    """
    Envelope for every error response.

    Example:
        {"success": false, "error": {"message": "Transcript cannot be empty"}}
    """
    success: bool = False
    error: ErrorDetail
