"""
Test Interview Queries Module

Tests the read-side Firestore queries and the GET routes built on them.

Dependencies:
- pytest: For testing framework
- app.services.interviews.interview_queries: The module being tested

Author: @kcaparas1630
"""

import pytest
from app.database import INTERVIEWS_COLLECTION, FEEDBACK_COLLECTION
from app.services.interviews import interview_queries

def seed_interview(fake_db, doc_id, user_id, created_at, finalized=True, is_custom=False):
    fake_db.collection(INTERVIEWS_COLLECTION).document(doc_id).set({
        "role": "Backend Engineer",
        "type": "technical",
        "level": "mid",
        "questions": ["What is a database index?"],
        "userId": user_id,
        "finalized": finalized,
        "isCustom": is_custom,
        "coverImage": "/covers/adobe.png",
        "createdAt": created_at,
    })

@pytest.fixture
def seeded_db(fake_db):
    seed_interview(fake_db, "a", "user-1", "2024-01-01T00:00:00+00:00")
    seed_interview(fake_db, "b", "user-1", "2024-03-01T00:00:00+00:00", is_custom=True)
    seed_interview(fake_db, "c", "user-2", "2024-02-01T00:00:00+00:00")
    seed_interview(fake_db, "d", "user-2", "2024-04-01T00:00:00+00:00")
    seed_interview(fake_db, "e", "user-3", "2024-05-01T00:00:00+00:00", finalized=False)
    fake_db.collection(FEEDBACK_COLLECTION).document("f1").set({
        "interviewId": "c", "userId": "user-1", "totalScore": 72,
    })
    return fake_db

class TestInterviewQueries:

    def test_get_interview_by_id(self, seeded_db):
        interview = interview_queries.get_interview_by_id(seeded_db, "a")
        assert interview["id"] == "a"
        assert interview["userId"] == "user-1"

    def test_get_missing_interview(self, seeded_db):
        assert interview_queries.get_interview_by_id(seeded_db, "missing") is None

    def test_feedback_matches_interview_and_user(self, seeded_db):
        feedback = interview_queries.get_feedback_by_interview_id(seeded_db, "c", "user-1")
        assert feedback == {"id": "f1", "interviewId": "c", "userId": "user-1", "totalScore": 72}

    def test_feedback_for_other_user_is_none(self, seeded_db):
        assert interview_queries.get_feedback_by_interview_id(seeded_db, "c", "user-2") is None

    def test_latest_excludes_own_and_unfinalized(self, seeded_db):
        latest = interview_queries.get_latest_interviews(seeded_db, "user-1")
        assert [interview["id"] for interview in latest] == ["d", "c"]

    def test_latest_respects_limit(self, seeded_db):
        latest = interview_queries.get_latest_interviews(seeded_db, "user-1", limit=1)
        assert [interview["id"] for interview in latest] == ["d"]

    def test_user_interviews_newest_first(self, seeded_db):
        interviews = interview_queries.get_interviews_by_user_id(seeded_db, "user-1")
        assert [interview["id"] for interview in interviews] == ["b", "a"]

    def test_resume_interviews_only_custom(self, seeded_db):
        interviews = interview_queries.get_resume_interviews_by_user_id(seeded_db, "user-1")
        assert [interview["id"] for interview in interviews] == ["b"]

class TestInterviewReadRoutes:

    def test_get_interview(self, client, seeded_db):
        response = client.get("/api/interviews/a")
        assert response.status_code == 200
        assert response.json()["id"] == "a"

    def test_get_missing_interview_is_404(self, client, seeded_db):
        response = client.get("/api/interviews/missing")
        assert response.status_code == 404
        assert response.json() == {"detail": "Interview 'missing' not found."}

    def test_latest(self, client, seeded_db):
        response = client.get("/api/interviews/latest", params={"userId": "user-1", "limit": 5})
        assert response.status_code == 200
        assert [interview["id"] for interview in response.json()] == ["d", "c"]

    def test_latest_requires_user(self, client, seeded_db):
        response = client.get("/api/interviews/latest")
        assert response.status_code == 422

    def test_feedback(self, client, seeded_db):
        response = client.get("/api/interviews/c/feedback", params={"userId": "user-1"})
        assert response.status_code == 200
        assert response.json()["totalScore"] == 72

    def test_missing_feedback_is_404(self, client, seeded_db):
        response = client.get("/api/interviews/a/feedback", params={"userId": "user-1"})
        assert response.status_code == 404

    def test_user_interviews(self, client, seeded_db):
        response = client.get("/api/users/user-1/interviews")
        assert [interview["id"] for interview in response.json()] == ["b", "a"]

    def test_user_custom_interviews(self, client, seeded_db):
        response = client.get("/api/users/user-1/interviews", params={"custom": "true"})
        assert [interview["id"] for interview in response.json()] == ["b"]
