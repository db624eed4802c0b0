"""
MindScribe Backend — FastAPI Dependencies
===========================================

What:  Accessors for the per-process clients stored on `app.state`.
How:   The lifespan (`app.main.init_services`) builds each client once from
       Settings; routes declare `Depends(get_...)`. Tests swap them with
       `app.dependency_overrides`.
"""

from fastapi import Request

from app.config import Settings
from app.services.ai_base import AIService
from app.services.file_service import FileService
from app.services.note_service import NoteService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service


def get_note_store(request: Request) -> NoteService:
    return request.app.state.note_store


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service
