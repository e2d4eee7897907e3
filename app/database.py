"""Firestore Connection Management Module

This module owns the single Firestore client the service uses for the
`interviews` and `feedback` collections. The Firebase Admin app and its
Firestore client are created lazily on first use and reused for the lifetime
of the process.

Credentials come either from a service account file (FIREBASE_CREDENTIALS_PATH)
or from the individual FIREBASE_PROJECT_ID / FIREBASE_CLIENT_EMAIL /
FIREBASE_PRIVATE_KEY variables.

Dependencies:
- firebase_admin: For Firebase app initialization and the Firestore client.
- dotenv: For environment variable loading.
- loguru: For logging operations.

Author: @kcaparas1630
"""

import os
import threading
import firebase_admin
from firebase_admin import credentials, firestore
from dotenv import load_dotenv
from loguru import logger
load_dotenv()

INTERVIEWS_COLLECTION = "interviews"
FEEDBACK_COLLECTION = "feedback"
TOKEN_URI = "https://oauth2.googleapis.com/token"

_db = None
_db_lock = threading.Lock()


def _load_credentials():
    """Build Firebase credentials from the environment.

    Raises:
        FileNotFoundError: If FIREBASE_CREDENTIALS_PATH points to a missing file
        ValueError: If neither credential source is configured
    """
    file_path = os.getenv("FIREBASE_CREDENTIALS_PATH")
    if file_path:
        if not os.path.exists(file_path):
            logger.error(f"Firebase credentials file not found at {file_path}")
            raise FileNotFoundError(f"Firebase credentials file not found at {file_path}")
        return credentials.Certificate(file_path)

    required_vars = {
        "FIREBASE_PROJECT_ID": os.getenv("FIREBASE_PROJECT_ID"),
        "FIREBASE_CLIENT_EMAIL": os.getenv("FIREBASE_CLIENT_EMAIL"),
        "FIREBASE_PRIVATE_KEY": os.getenv("FIREBASE_PRIVATE_KEY"),
    }
    missing_vars = [var for var, value in required_vars.items() if not value]
    if missing_vars:
        raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

    return credentials.Certificate({
        "type": "service_account",
        "project_id": required_vars["FIREBASE_PROJECT_ID"],
        "client_email": required_vars["FIREBASE_CLIENT_EMAIL"],
        # Replace escaped newlines in the private key
        "private_key": required_vars["FIREBASE_PRIVATE_KEY"].replace("\\n", "\n"),
        "token_uri": TOKEN_URI,
    })


def get_firestore_client():
    """Return the process-wide Firestore client, creating it on first call."""
    global _db

    if _db is None:
        with _db_lock:
            # Double-check locking pattern
            if _db is None:
                if not firebase_admin._apps:
                    firebase_admin.initialize_app(_load_credentials())
                    logger.info("Firebase Admin app initialized")
                _db = firestore.client()
                logger.info("Firestore client created")
    return _db


def get_db():
    """FastAPI dependency for Firestore access.

    Example:
        @router.get("/interviews/{interview_id}")
        async def get_interview(interview_id: str, db = Depends(get_db)):
            return get_interview_by_id(db, interview_id)
    """
    return get_firestore_client()
