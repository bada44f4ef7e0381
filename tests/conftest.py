import itertools
import sys
from pathlib import Path

import pytest
from bson import ObjectId


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from coding_round_cbt.models.question_model import QuestionDefinition
from coding_round_cbt.services.session_storage import (
    REGISTRATION_ID_KEY, USER_EMAIL_KEY, SessionStorage,
)


REGISTRATION = {
    "fullname": "Ada Lovelace",
    "email": "ada@example.com",
    "dob": "1815-12-10",
    "contact": "5550100",
    "gender": "F",
    "school": "Analytical Academy",
}


class FakeHandle:
    def __init__(self, when, seq, callback, args):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled


class FakeScheduler:
    """call_later 만 흉내내는 수동 시계. advance() 로 시간을 진행."""

    def __init__(self):
        self.now = 0.0
        self._seq = itertools.count()
        self._handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now + delay, next(self._seq), callback, args)
        self._handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self._handles if not h.cancelled()]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self.pending() if h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target
        self._handles = self.pending()


class FakeInsertResult:
    def __init__(self, inserted_id, acknowledged=True):
        self.inserted_id = inserted_id
        self.acknowledged = acknowledged


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.acknowledge = True

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def find_one(self, query):
        for doc in self.docs:
            if self._matches(doc, query):
                return dict(doc)
        return None

    def find(self, query):
        return [dict(doc) for doc in self.docs if self._matches(doc, query)]

    def insert_one(self, doc):
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        if self.acknowledge:
            self.docs.append(doc)
        return FakeInsertResult(doc["_id"], acknowledged=self.acknowledge)


class FakeDB:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeSubmitter:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def submit(self, payload):
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return {"message": "Test results submitted successfully!", "id": "r1"}


class FakeLoader:
    def __init__(self, questions):
        self._questions = questions
        self.loads = 0
        self.loaded = False

    async def load(self):
        self.loads += 1
        self.loaded = True
        return list(self._questions)


def make_questions(count):
    return [
        QuestionDefinition.model_validate({
            "questionNumber": n,
            "title": f"Question {n}",
            "description": f"Solve problem {n}.",
            "difficulty": "Easy",
            "topic": "Arrays",
            "testCases": [{"input": str(n), "expectedOutput": str(n * 2)}],
        })
        for n in range(1, count + 1)
    ]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def storage():
    return SessionStorage()


@pytest.fixture
def identified_storage():
    return SessionStorage({
        USER_EMAIL_KEY: "candidate@example.com",
        REGISTRATION_ID_KEY: "reg-123",
    })


@pytest.fixture
def fake_db():
    return FakeDB()
