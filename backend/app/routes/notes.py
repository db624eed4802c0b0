"""
MindScribe Backend — Notes Route Handlers
===========================================

What:  POST /api/saveNote (persist a note) and GET /api/notes (list a user's notes).
How:   Presence checks on userId/summary, then a single NoteService call.
       Notes are immutable once saved; there is no update or delete route.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_note_store
from app.schemas.note import (
    ErrorResponse,
    NoteListResponse,
    NoteResponse,
    SaveNoteRequest,
    SaveNoteResponse,
)
from app.services.note_service import NoteService
from app.validators import require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.post(
    "/saveNote",
    response_model=SaveNoteResponse,
    responses={
        400: {"description": "userId or summary missing", "model": ErrorResponse},
        500: {"description": "Firestore write failed", "model": ErrorResponse},
    },
    summary="Save a note",
)
async def save_note(
    payload: Optional[SaveNoteRequest] = None,
    note_store: NoteService = Depends(get_note_store),
) -> SaveNoteResponse:
    """
    Persist `{userId, summary, transcript?}`.

    Returns the saved note with its Firestore document id. `transcript`
    defaults to "" when omitted.
    """
    payload = payload or SaveNoteRequest()
    user_id = require_text(payload.user_id, field="userId", missing_message="userId is required")
    summary = require_text(payload.summary, field="summary", missing_message="summary is required")

    note = await note_store.create_note(user_id, summary, payload.transcript or "")
    return SaveNoteResponse(note=NoteResponse.model_validate(note))


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={
        400: {"description": "userId query parameter missing", "model": ErrorResponse},
        500: {"description": "Firestore query failed", "model": ErrorResponse},
    },
    summary="List a user's notes, newest first",
)
async def list_notes(
    user_id: Optional[str] = Query(default=None, alias="userId", description="Owner of the notes"),
    note_store: NoteService = Depends(get_note_store),
) -> NoteListResponse:
    user_id = require_text(
        user_id, field="userId", missing_message="userId query parameter is required"
    )

    notes = await note_store.list_notes(user_id)
    return NoteListResponse(
        notes=[NoteResponse.model_validate(note) for note in notes],
        count=len(notes),
    )
