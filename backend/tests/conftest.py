import json
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from rentverse.database import get_db, get_engine, init_db, utcnow
from rentverse.main import app
from rentverse.models.listing import Listing
from rentverse.models.user import User
from rentverse.services.llm_client import get_llm_client
from rentverse.services.realtime_service import RealtimePublisher, get_publisher


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replies are consumed in order,
    the last one repeats. A reply may be a dict, a raw string or an exception."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        content = reply if isinstance(reply, str) else json.dumps(reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeLLM:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies or ({},))
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


class RecordingPublisher(RealtimePublisher):
    def __init__(self, fail: bool = False):
        super().__init__(url="http://realtime.test")
        self.fail = fail
        self.events = []

    async def publish(self, channel, event, payload):
        if self.fail:
            raise RuntimeError("realtime unavailable")
        self.events.append((channel, event, payload))


@pytest.fixture
def test_db(tmp_path):
    engine = get_engine(f"sqlite:///{tmp_path / 'test.sqlite'}")
    init_db(engine)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def client(test_db, publisher):
    app.dependency_overrides[get_llm_client] = lambda: None
    app.dependency_overrides[get_publisher] = lambda: publisher
    return TestClient(app)


@pytest.fixture
def use_llm():
    def _use(fake):
        app.dependency_overrides[get_llm_client] = lambda: fake
        return fake

    return _use


@pytest.fixture
def make_user(client, test_db):
    counter = {"n": 0}

    def _make(first_name="Alice", email=None, role=None, password="s3cure-password"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        r = client.post("/api/v1/auth/register", json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": "Tester",
        })
        assert r.status_code == 201, r.text
        data = r.json()
        if role:
            with test_db() as db:
                db.get(User, data["user"]["id"]).role = role
                db.commit()
        return SimpleNamespace(
            id=data["user"]["id"],
            token=data["token"],
            headers={"Authorization": f"Bearer {data['token']}"},
        )

    return _make


@pytest.fixture
def make_listing(client):
    def _make(owner, **overrides):
        body = {
            "title": "Cordless Drill",
            "description": "18V drill with two batteries",
            "price": 25,
            "category": "Tools",
            "location": "Berlin",
            "tags": [],
        }
        body.update(overrides)
        r = client.post("/api/v1/listings", json=body, headers=owner.headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def insert_listings(test_db):
    """Bulk insert straight into the database, bypassing the API."""
    def _insert(owner_id, count, **fields):
        now = utcnow()
        with test_db() as db:
            for i in range(count):
                db.add(Listing(
                    id=str(uuid.uuid4()),
                    owner_id=owner_id,
                    title=fields.get("title", f"Item {i}"),
                    description=fields.get("description", ""),
                    category=fields.get("category", "Tools"),
                    price=fields.get("price", 10),
                    price_unit="DAY",
                    status=fields.get("status", "ACTIVE"),
                    available=True,
                    rating=0.0,
                    created_at=now,
                    updated_at=now,
                ))
            db.commit()

    return _insert
