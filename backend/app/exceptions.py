"""
MindScribe Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, each carrying the HTTP status it maps to.
How:   Services and routes raise these; the handlers registered in main.py
       turn them into the `{success: false, error: {message}}` envelope.
       Nothing below the handlers attempts recovery.

Exception Hierarchy:
    MindScribeError (base)       → status_code attribute, default 500
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found (unmatched route)
    ├── UpstreamError            → provider status, else 500
    ├── PersistenceError         → 500 Internal Server Error
    └── FileStorageError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class MindScribeError(Exception):
    """
    Base exception for all MindScribe application errors.

    Attributes:
        message:      User-facing error description (returned in the envelope)
        status_code:  HTTP status the error handler responds with
        context:      Extra debug info (logged, never returned to the client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Internal Server Error",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MindScribeError):
    """
    Raised when client input is missing or malformed.

    When:  Missing upload, unsupported audio type, oversized file, empty text,
           missing userId/summary.
    HTTP:  400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MindScribeError):
    """
    Raised for requests that match no route.

    HTTP:  404 Not Found
    """

    status_code = 404

    def __init__(self, path: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=f"Route {path} not found", context=context)
        self.path = path


class UpstreamError(MindScribeError):
    """
    Raised when an AI provider call fails or returns an unexpected shape.

    What:    Wraps Gemini SDK errors, Text-to-Speech HTTP errors and response
             shape mismatches into one type with the provider's message.
    HTTP:    The provider's status when it reported one (4xx/5xx), else 500.
    """

    def __init__(
        self,
        message: str = "AI service request failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if status_code is not None and not 400 <= status_code <= 599:
            status_code = None
        super().__init__(message=message, status_code=status_code, context=context)


class PersistenceError(MindScribeError):
    """
    Raised when a Firestore or Cloud Storage operation fails.

    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(MindScribeError):
    """
    Raised when a temporary upload cannot be written to or read from disk.

    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
