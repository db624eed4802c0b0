"""
MindScribe Backend — Note Store (Firestore + Cloud Storage)
=============================================================

What:  Persists notes to the Firestore `notes` collection, lists them per
       user, and uploads synthesized audio to Cloud Storage.
How:   The Firebase Admin SDK is synchronous, so each store call runs in a
       worker thread through `asyncio.to_thread`. Every operation is a single
       store call; failures are wrapped in PersistenceError.
Who:   Built in the app lifespan from the Firestore client and bucket returned
       by `app.firebase.init_firebase`; routes receive it via `get_note_store`.

Document layout (collection `notes`):
    {
        "userId":     "u1",
        "summary":    "- short bullets",
        "transcript": "",
        "timestamp":  <server timestamp>,
        "createdAt":  "2024-01-15T12:00:00.000000+00:00",
        "id":         "<uuid4>"         # superseded by the document id on read
    }
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from google.cloud import firestore

from app.exceptions import PersistenceError

logger = logging.getLogger(__name__)

AUDIO_PREFIX = "audio/"
AUDIO_CONTENT_TYPE = "audio/mpeg"
PUBLIC_URL_BASE = "https://storage.googleapis.com"


class NoteService:
    """
    Firestore/Cloud Storage access for notes and synthesized audio.

    Args:
        db:         google.cloud.firestore.Client (or a compatible fake in tests)
        bucket:     google.cloud.storage.Bucket
        collection: Firestore collection holding notes
    """

    def __init__(self, db: Any, bucket: Any, collection: str = "notes"):
        self.db = db
        self.bucket = bucket
        self.collection = collection

    async def create_note(
        self, user_id: str, summary: str, transcript: str = ""
    ) -> Dict[str, Any]:
        """
        Add a note document and return it with its store-assigned id.

        The returned `timestamp` is None: Firestore resolves the server
        timestamp on write and it is only visible on later reads.

        Raises:
            PersistenceError: The write failed.
        """
        record = {
            "userId": user_id,
            "summary": summary,
            "transcript": transcript,
            "timestamp": firestore.SERVER_TIMESTAMP,
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "id": str(uuid.uuid4()),
        }

        logger.info("Saving note for user: %s", user_id)
        try:
            _, doc_ref = await asyncio.to_thread(
                self.db.collection(self.collection).add, record
            )
        except Exception as e:
            logger.error("Error saving note: %s", str(e))
            raise PersistenceError(
                message=f"Failed to save note: {e}",
                context={"user_id": user_id, "error_type": type(e).__name__},
            ) from e

        logger.info("Note saved with ID: %s", doc_ref.id)
        return {**record, "timestamp": None, "id": doc_ref.id}

    async def list_notes(self, user_id: str) -> List[Dict[str, Any]]:
        """
        All notes owned by `user_id`, newest first (server timestamp DESC).

        Requires a composite Firestore index on (userId ASC, timestamp DESC).

        Raises:
            PersistenceError: The query failed (including a missing index).
        """
        logger.info("Fetching notes for user: %s", user_id)
        query = (
            self.db.collection(self.collection)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
        )
        try:
            snapshots = await asyncio.to_thread(query.get)
        except Exception as e:
            logger.error("Error fetching notes: %s", str(e))
            raise PersistenceError(
                message=f"Failed to fetch notes: {e}",
                context={"user_id": user_id, "error_type": type(e).__name__},
            ) from e

        notes = [{**snapshot.to_dict(), "id": snapshot.id} for snapshot in snapshots]
        logger.info("Found %d notes", len(notes))
        return notes

    async def upload_audio(self, audio: bytes, file_name: str) -> str:
        """
        Store MP3 bytes at `audio/<file_name>`, make the object public, and
        return its URL: https://storage.googleapis.com/<bucket>/audio/<file_name>

        Raises:
            PersistenceError: Upload or ACL change failed.
        """
        blob_path = f"{AUDIO_PREFIX}{file_name}"
        logger.info("Uploading audio to storage: %s", blob_path)

        def _upload() -> str:
            blob = self.bucket.blob(blob_path)
            blob.upload_from_string(audio, content_type=AUDIO_CONTENT_TYPE)
            blob.make_public()
            return blob.name

        try:
            stored_name = await asyncio.to_thread(_upload)
        except Exception as e:
            logger.error("Error uploading audio: %s", str(e))
            raise PersistenceError(
                message=f"Failed to upload audio: {e}",
                context={"blob": blob_path, "error_type": type(e).__name__},
            ) from e

        public_url = f"{PUBLIC_URL_BASE}/{self.bucket.name}/{stored_name}"
        logger.info("Audio uploaded: %s", public_url)
        return public_url
