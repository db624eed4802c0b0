# Routes package init
"""
MindScribe Backend — API Routes Package
=========================================

Route Inventory:
    - health.py:      GET  /health
    - transcribe.py:  POST /api/transcribe      (multipart `audio` → transcript)
    - summarize.py:   POST /api/summarize       (transcript → simplified summary)
    - tts.py:         POST /api/tts             (text → public MP3 URL)
    - notes.py:       POST /api/saveNote        (persist a note)
                      GET  /api/notes?userId=   (list a user's notes)

Routes validate input, call one client, and shape the JSON. Failures are
raised, never caught: the handlers in main.py own the error envelope.
"""
