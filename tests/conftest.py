import os

# Point the app at an in-memory store before db.session is imported
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

import models  # noqa: F401  registers tables
from core.deps import get_current_user, get_worker_directory
from db.session import build_engine, get_session
from models.shift import ShiftCreate
from services.shift_service import ShiftService
from services.worker_service import WorkerDirectory

FUTURE_DATE = date.today() + timedelta(days=7)

USERS = {
    "worker-1": {"displayName": "Alice Worker", "email": "alice@example.com", "role": "worker"},
    "worker-2": {"displayName": "Bob Worker", "email": "bob@example.com", "role": "worker"},
    "admin-1": {"displayName": "Ada Admin", "email": "ada@example.com", "role": "admin"},
}


# --- Minimal Firestore stand-in (collection/document/get_all/where) ---


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self.store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.store.get(self.id))


class FakeQuery:
    def __init__(self, store, field, value):
        self.store = store
        self.field = field
        self.value = value

    def stream(self):
        return [
            FakeSnapshot(doc_id, data)
            for doc_id, data in self.store.items()
            if data.get(self.field) == self.value
        ]


class FakeCollection:
    def __init__(self, store):
        self.store = store

    def document(self, doc_id):
        return FakeDocument(self.store, doc_id)

    def where(self, field, op, value):
        assert op == "=="
        return FakeQuery(self.store, field, value)


class FakeFirestore:
    def __init__(self, users):
        self.collections = {"users": users}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))

    def get_all(self, refs):
        return [ref.get() for ref in refs]


# --- Payload builders ---


def location_payload(**overrides):
    payload = {
        "name": "Old Trafford Stadium",
        "address": "Sir Matt Busby Way",
        "postCode": "M16 0RA",
        "cordinates": {"longitude": -2.291032, "latitude": 53.462559, "useRotaCloud": True},
        "constituency": "Stretford and Urmston",
        "adminDistrict": "Trafford",
    }
    payload.update(overrides)
    return payload


def shift_payload(**overrides):
    payload = {
        "title": "Matchday Steward",
        "role": "Steward",
        "typeOfShift": ["Weekend", "Morning"],
        "user": "worker-1",
        "startTime": "09:00",
        "finishTime": "17:00",
        "numOfShiftsPerDay": 1,
        "location": location_payload(),
        "date": FUTURE_DATE.isoformat(),
    }
    payload.update(overrides)
    return payload


# --- Fixtures ---


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def firestore():
    return FakeFirestore({uid: dict(profile) for uid, profile in USERS.items()})


@pytest.fixture
def workers(firestore):
    return WorkerDirectory(firestore)


@pytest.fixture
def service(session, workers):
    return ShiftService(session, workers)


@pytest.fixture
def make_shift_payload():
    return shift_payload


@pytest.fixture
def make_location_payload():
    return location_payload


@pytest.fixture
def create_shift(service):
    """Create a shift through the service; keyword overrides use wire (camelCase) names."""

    def _create(**overrides):
        return service.create_shift(ShiftCreate.model_validate(shift_payload(**overrides)))

    return _create


@pytest.fixture
def current_user():
    # Mutable so a test can switch the caller mid-test
    return {"uid": "admin-1", "name": "Ada Admin", "email": "ada@example.com", "role": "admin"}


@pytest.fixture
def app(engine, workers, current_user):
    from main import app

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_worker_directory] = lambda: workers
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def as_worker(current_user):
    def _switch(uid="worker-1"):
        current_user.update(uid=uid, name=USERS[uid]["displayName"], email=USERS[uid]["email"], role="worker")

    return _switch
