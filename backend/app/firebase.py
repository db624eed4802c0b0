"""
MindScribe Backend — Firebase Initialization
==============================================

What:  Builds the Firebase Admin app from Settings and hands out the
       Firestore client and default Storage bucket.
When:  Called once from the app lifespan, after `validate_required()`.
"""

import logging
from typing import Any, Tuple

import firebase_admin
from firebase_admin import credentials, firestore, storage

from app.config import Settings

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_credentials(settings: Settings) -> credentials.Certificate:
    """Service-account credential from the three FIREBASE_* variables."""
    return credentials.Certificate(
        {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key": settings.firebase_private_key_pem,
            "client_email": settings.firebase_client_email,
            "token_uri": TOKEN_URI,
        }
    )


def init_firebase(settings: Settings) -> Tuple[Any, Any]:
    """
    Initialize (or reuse) the default Firebase app.

    Returns:
        (firestore client, storage bucket)

    Raises:
        ValueError: The credential fields are malformed.
    """
    try:
        fb_app = firebase_admin.get_app()
    except ValueError:
        fb_app = firebase_admin.initialize_app(
            build_credentials(settings),
            {
                "projectId": settings.firebase_project_id,
                "storageBucket": settings.storage_bucket_name,
            },
        )
        logger.info(
            "Firebase Admin initialized for project=%s bucket=%s",
            settings.firebase_project_id,
            settings.storage_bucket_name,
        )

    db = firestore.client(app=fb_app)
    bucket = storage.bucket(app=fb_app)
    return db, bucket
