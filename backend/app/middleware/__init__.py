# Middleware package init
"""
MindScribe Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Access log] → [GZip] → [CORS] → [Unhandled error] → Route Handler

    The request ID is set first so the access log and the exception handlers
    can tag their lines with it. Unexpected exceptions become a 500 envelope
    innermost, so they pass back out through CORS and the request-ID header.
"""
