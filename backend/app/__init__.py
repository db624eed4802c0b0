"""
MindScribe Backend — Application Package Initializer
====================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`app.main:app`), `python -m app`, and pytest.

Architecture Note:
    The backend is a thin layer in front of hosted services:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← input validation, JSON shaping
    ├─────────────────────────────────────┤
    │   Services (AI client, note store,  │  ← one upstream call per operation
    │   temp-file handling)               │
    ├─────────────────────────────────────┤
    │   Schemas (Pydantic request/reply)  │  ← wire contract
    ├─────────────────────────────────────┤
    │   Firebase (Firestore + Storage)    │  ← persistence handles
    └─────────────────────────────────────┘

    Speech-to-text and summarization go to Google Gemini, speech synthesis to
    Google Cloud Text-to-Speech, and notes/audio to Firebase.
"""

__version__ = "1.0.0"
