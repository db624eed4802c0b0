# Services package init
"""
MindScribe Backend — Services Layer
=====================================

Service Inventory:
    - AIService (abstract):  transcribe / summarize / synthesize contract
    - GeminiService:         Gemini SDK + Cloud Text-to-Speech REST implementation
    - FileService:           audio upload validation and temporary-file lifecycle
    - NoteService:           Firestore notes and Cloud Storage audio uploads

Each service is constructed once at startup with explicit configuration and
stored on `app.state`; see app/dependencies.py.
"""
