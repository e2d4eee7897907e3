"""
Description:
Read-side queries over the interviews and feedback collections.

Each function is a single Firestore read: a document lookup or one filtered,
ordered query. There is no caching and no pagination cursor; `limit` caps the
page size where a listing is unbounded.

Arguments:
- db: Firestore client (see app.database.get_db).

Dependencies:
- firebase_admin: For the Firestore query direction constants.
- google.cloud.firestore_v1: For field filters.
- loguru: For logging.

author: @kcaparas1630
"""
from typing import List, Optional
from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from loguru import logger
from app.database import INTERVIEWS_COLLECTION, FEEDBACK_COLLECTION

DEFAULT_LATEST_LIMIT = 20


def _with_id(snapshot) -> dict:
    return {"id": snapshot.id, **snapshot.to_dict()}


def get_interview_by_id(db, interview_id: str) -> Optional[dict]:
    snapshot = db.collection(INTERVIEWS_COLLECTION).document(interview_id).get()
    if not snapshot.exists:
        return None
    return _with_id(snapshot)


def get_feedback_by_interview_id(db, interview_id: str, user_id: str) -> Optional[dict]:
    """
    Fetch the feedback a user received for an interview.

    Returns:
        The first matching feedback document with its id, or None
    """
    query = (
        db.collection(FEEDBACK_COLLECTION)
        .where(filter=FieldFilter("interviewId", "==", interview_id))
        .where(filter=FieldFilter("userId", "==", user_id))
        .limit(1)
    )
    for snapshot in query.stream():
        return _with_id(snapshot)
    return None


def get_latest_interviews(db, user_id: str, limit: int = DEFAULT_LATEST_LIMIT) -> List[dict]:
    """
    List the most recent finalized interviews created by other users.

    Args:
        user_id: The current user, whose own interviews are excluded
        limit: Page size
    """
    query = (
        db.collection(INTERVIEWS_COLLECTION)
        .order_by("createdAt", direction=firestore.Query.DESCENDING)
        .where(filter=FieldFilter("finalized", "==", True))
        .where(filter=FieldFilter("userId", "!=", user_id))
        .limit(limit)
    )
    return [_with_id(snapshot) for snapshot in query.stream()]


def get_interviews_by_user_id(db, user_id: str) -> List[dict]:
    query = (
        db.collection(INTERVIEWS_COLLECTION)
        .where(filter=FieldFilter("userId", "==", user_id))
        .order_by("createdAt", direction=firestore.Query.DESCENDING)
    )
    return [_with_id(snapshot) for snapshot in query.stream()]


def get_resume_interviews_by_user_id(db, user_id: str) -> List[dict]:
    """List a user's resume-based (custom) interviews, newest first."""
    try:
        query = (
            db.collection(INTERVIEWS_COLLECTION)
            .where(filter=FieldFilter("userId", "==", user_id))
            .where(filter=FieldFilter("isCustom", "==", True))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        return [_with_id(snapshot) for snapshot in query.stream()]
    except Exception as e:
        logger.error(f"Error getting resume-based interviews: {e}")
        raise
