"""
MindScribe Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn app.main:app`) and by `python -m app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │  Req ID  │→│ Access log  │→│ GZip │→│   CORS   │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │        → [Unhandled error → 500 envelope]           │
    │                                                     │
    │  Routes:                                            │
    │   /health  /api/transcribe  /api/summarize          │
    │   /api/tts  /api/saveNote  /api/notes               │
    │                                                     │
    │  Exception Handlers (single error envelope):        │
    │   MindScribeError → its status_code                 │
    │   RequestValidationError → 400                      │
    │   HTTPException 404/405 → 404 "Route ... not found" │
    │   Exception → 500                                   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (startup aborts on missing env vars)
    3. Initialize Firebase, build the AI client, note store and file service
    Shutdown:
    1. Close the AI client's HTTP connections
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, settings as default_settings
from app.exceptions import MindScribeError, NotFoundError
from app.middleware.errors import UnhandledErrorMiddleware, error_response
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, notes, summarize, transcribe, tts

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party clients log every request at INFO/DEBUG.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def init_services(app: FastAPI, app_settings: Settings) -> None:
    """
    Build every client from Settings and attach it to `app.state`.

    Clients already present on `app.state` are left alone.
    """
    from app.firebase import init_firebase
    from app.services.ai_service import GeminiService
    from app.services.file_service import FileService
    from app.services.note_service import NoteService

    if getattr(app.state, "note_store", None) is None:
        db, bucket = init_firebase(app_settings)
        app.state.note_store = NoteService(db, bucket, collection=app_settings.notes_collection)
    if getattr(app.state, "ai_service", None) is None:
        app.state.ai_service = GeminiService(app_settings)
    if getattr(app.state, "file_service", None) is None:
        app.state.file_service = FileService(
            upload_dir=app_settings.upload_dir,
            max_upload_size=app_settings.max_upload_size,
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("MindScribe Backend starting up...")

    try:
        app_settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    init_services(app, app_settings)

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)
    logger.info("Health check: http://%s:%d/health", app_settings.host, app_settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MindScribe Backend shutting down...")
    ai_service = getattr(app.state, "ai_service", None)
    if ai_service is not None:
        await ai_service.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _original_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to the error envelope.

    Handler hierarchy:
        MindScribeError         → exc.status_code (400/404/500/provider status)
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        HTTPException 404/405   → 404 "Route <path> not found"
        HTTPException other     → its status and detail
        Exception               → 500, via UnhandledErrorMiddleware inside the
                                  middleware stack; the handler below only
                                  sees failures raised by middleware itself
    """

    @app.exception_handler(MindScribeError)
    async def handle_app_error(request: Request, exc: MindScribeError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_response(request, exc.status_code, exc.message, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        else:
            message = "Invalid request"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return error_response(request, 400, message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method both read as
        # "no such route" to the client.
        if exc.status_code in (404, 405):
            not_found = NotFoundError(_original_url(request))
            return error_response(request, not_found.status_code, not_found.message)
        return error_response(request, exc.status_code, str(exc.detail), exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(request, 500, str(exc) or "Internal Server Error", exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration for this instance; defaults to the
                      process-wide `app.config.settings`.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="MindScribe API",
        description=(
            "Transcribes lecture audio, simplifies transcripts into short "
            "bullet-point summaries, reads summaries aloud, and stores notes."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS → UnhandledError
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(transcribe.router)
    app.include_router(summarize.router)
    app.include_router(tts.router)
    app.include_router(notes.router)

    return app


app = create_app()
