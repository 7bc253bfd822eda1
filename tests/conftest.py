import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from tutor.app import create_app
from tutor.config import Settings
from tutor.inference import InferenceError


class FakeMetrics:
    def __init__(self):
        self.counters = []
        self.timings = []

    def incr(self, stat, count=1, rate=1):
        self.counters.append(stat)

    def timing(self, stat, delta, rate=1):
        self.timings.append(stat)


class FakeInference:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {}
        self.error = error
        self.calls = []

    def run(self, model_id, prompt):
        self.calls.append((model_id, prompt))
        if self.error is not None:
            raise InferenceError(self.error)
        return self.result


class FakeStore:
    def __init__(self, rows=None, fail_insert=False, fail_query=False):
        self.rows = rows or {}
        self.fail_insert = fail_insert
        self.fail_query = fail_query
        self.inserted = []

    def insert(self, student_id, grade, subject, question, response, timestamp):
        if self.fail_insert:
            raise OperationalError("INSERT INTO study_sessions", {}, Exception("database is locked"))
        self.inserted.append((student_id, grade, subject, question, response, timestamp))

    def count_by_subject(self, student_id):
        if self.fail_query:
            raise OperationalError("SELECT subject", {}, Exception("no such table: study_sessions"))
        return self.rows.get(student_id, [])


@pytest.fixture
def metrics():
    return FakeMetrics()


@pytest.fixture
def inference():
    return FakeInference(result={"response": "R"})


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def client(inference, store, metrics):
    app = create_app(settings=Settings(), inference=inference, store=store, metrics=metrics)
    return TestClient(app)


@pytest.fixture
def chat_body():
    return {
        "question": "Why is the sky blue?",
        "student_id": "s-1",
        "grade": "Grade 5",
        "subject": "physics",
        "language": "en",
    }
