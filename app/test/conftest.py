"""
Shared test fixtures

In-memory stand-ins for the two external systems the service talks to:
Firestore (only the calls the service makes) and the language model.

Author: @kcaparas1630
"""

import os
os.environ.setdefault("ENV", "test")

import itertools
from typing import Any, List, Optional
import pytest
from fastapi.testclient import TestClient
from app.constants.interviewer import FEEDBACK_CATEGORIES
from app.core.llm_provider import LLMProvider, get_question_llm, get_feedback_llm
from app.core.route_limiters import limiter
from app.database import get_db
from app.main import app
from app.services.voice_session.session_notifier import SessionNotifier
from app.services.voice_session.voice_client import VoiceClient

_ids = itertools.count(1)


class FakeSnapshot:
    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store: dict, doc_id: str):
        self._store = store
        self.id = doc_id

    def set(self, data: dict) -> None:
        self._store[self.id] = dict(data)

    def get(self) -> FakeSnapshot:
        return FakeSnapshot(self.id, self._store.get(self.id))


class FakeQuery:
    def __init__(self, store: dict, filters=None, order=None, limit_count=None):
        self._store = store
        self._filters = filters or []
        self._order = order
        self._limit = limit_count

    def where(self, filter):
        return FakeQuery(self._store, self._filters + [filter], self._order, self._limit)

    def order_by(self, field: str, direction: str = "ASCENDING"):
        return FakeQuery(self._store, self._filters, (field, direction), self._limit)

    def limit(self, count: int):
        return FakeQuery(self._store, self._filters, self._order, count)

    def _matches(self, data: dict) -> bool:
        for field_filter in self._filters:
            value = data.get(field_filter.field_path)
            if field_filter.op_string == "==" and value != field_filter.value:
                return False
            if field_filter.op_string == "!=" and value == field_filter.value:
                return False
        return True

    def stream(self):
        results = [(doc_id, data) for doc_id, data in self._store.items() if self._matches(data)]
        if self._order:
            field, direction = self._order
            results.sort(key=lambda item: item[1].get(field, ""), reverse=direction == "DESCENDING")
        if self._limit is not None:
            results = results[:self._limit]
        for doc_id, data in results:
            yield FakeSnapshot(doc_id, data)


class FakeCollection(FakeQuery):
    def __init__(self, store: dict, fail_writes: bool = False):
        super().__init__(store)
        self._fail_writes = fail_writes

    def document(self, doc_id: Optional[str] = None) -> FakeDocumentRef:
        if self._fail_writes:
            raise RuntimeError("Firestore unavailable")
        return FakeDocumentRef(self._store, doc_id or f"doc-{next(_ids)}")

    def add(self, data: dict):
        doc_ref = self.document()
        doc_ref.set(data)
        return None, doc_ref


class FakeFirestore:
    """Dict-backed Firestore client covering collection/document/query calls."""

    def __init__(self):
        self.collections = {}
        self.fail_writes = False

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self.collections.setdefault(name, {}), self.fail_writes)

    def documents(self, name: str) -> dict:
        return self.collections.get(name, {})


class FakeLLM(LLMProvider):
    """Scripted model: returns queued replies in order, raising any queued exception."""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls = []

    def _next(self):
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def generate_text(self, prompt, system=None):
        self.calls.append({"prompt": prompt, "system": system})
        return self._next()

    async def generate_object(self, prompt, schema, system=None):
        self.calls.append({"prompt": prompt, "system": system, "schema": schema})
        return schema.model_validate(self._next())


class FakeVoiceClient(VoiceClient):
    def __init__(self, fail_start: bool = False):
        super().__init__()
        self.fail_start = fail_start
        self.started = []
        self.stopped = 0

    async def start(self, assistant, variable_values):
        if self.fail_start:
            raise ConnectionError("vendor unreachable")
        self.started.append((assistant, variable_values))

    async def stop(self):
        self.stopped += 1


class RecordingNotifier(SessionNotifier):
    def __init__(self):
        self.notices = []
        self.paths = []
        self.states = []

    async def notify(self, level, message):
        self.notices.append((level, message))

    async def navigate(self, path):
        self.paths.append(path)

    async def publish_state(self, state):
        self.states.append(state)


def sample_feedback_analysis(total: int = 78) -> dict:
    return {
        "totalScore": total,
        "categoryScores": [{"name": name, "score": total, "comment": f"{name} was solid."} for name in FEEDBACK_CATEGORIES],
        "strengths": ["Clear structure"],
        "areasForImprovement": ["More concrete metrics"],
        "finalAssessment": "A capable candidate with room to grow.",
    }


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def question_llm():
    return FakeLLM()


@pytest.fixture
def feedback_llm():
    return FakeLLM()


@pytest.fixture
def client(fake_db, question_llm, feedback_llm):
    limiter.enabled = False
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_question_llm] = lambda: question_llm
    app.dependency_overrides[get_feedback_llm] = lambda: feedback_llm
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def feedback_analysis():
    return sample_feedback_analysis


@pytest.fixture
def voice_client():
    return FakeVoiceClient()


@pytest.fixture
def notifier():
    return RecordingNotifier()
