"""Shared fixtures and in-memory fakes for the test suite."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from repositories.user_repo import UserRepository
from security.rate_limiter import bot_limiter
from services.notifier import AdminNotifier


# -- Firestore ---------------------------------------------------------------

class FakeDocument:
    def __init__(self, db: "FakeFirestore", collection: str, key: str):
        self.db = db
        self.collection = collection
        self.key = key

    async def set(self, data: dict) -> None:
        if self.db.error is not None:
            raise self.db.error
        self.db.writes.append((self.collection, self.key))
        self.db.data.setdefault(self.collection, {})[self.key] = dict(data)


class FakeCountQuery:
    def __init__(self, db: "FakeFirestore", collection: str, alias: str | None):
        self.db = db
        self.collection = collection
        self.alias = alias

    async def get(self):
        if self.db.error is not None:
            raise self.db.error
        total = len(self.db.data.get(self.collection, {}))
        return [[SimpleNamespace(alias=self.alias, value=total)]]


class FakeCollection:
    def __init__(self, db: "FakeFirestore", name: str):
        self.db = db
        self.name = name

    def document(self, key: str) -> FakeDocument:
        return FakeDocument(self.db, self.name, key)

    def count(self, alias: str | None = None) -> FakeCountQuery:
        return FakeCountQuery(self.db, self.name, alias)


class FakeFirestore:
    """Mimics the slice of google.cloud.firestore.AsyncClient the repository uses."""

    def __init__(self):
        self.data: dict[str, dict[str, dict]] = {}
        self.writes: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)


# -- Telegram ----------------------------------------------------------------

class FakeBot:
    def __init__(self):
        self.sent: list[dict] = []
        self.error: Exception | None = None

    async def send_message(self, chat_id, text, **kwargs):
        if self.error is not None:
            raise self.error
        self.sent.append({"chat_id": chat_id, "text": text})

    async def set_my_commands(self, commands, **kwargs):
        self.commands = list(commands)


class RecordingNotifier:
    """Stands in for AdminNotifier where only the dispatch call matters."""

    def __init__(self):
        self.dispatched = []

    def dispatch(self, record):
        self.dispatched.append(record)

    async def drain(self):
        return None


class FakeMessage:
    def __init__(self):
        self.replies: list[str] = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)


def make_update(user_id: int = 42, chat_id: int = 42):
    return SimpleNamespace(
        effective_user=SimpleNamespace(id=user_id, username="admin", first_name="Admin"),
        effective_chat=SimpleNamespace(id=chat_id),
        message=FakeMessage(),
    )


# -- Fixtures ----------------------------------------------------------------

@pytest.fixture()
def firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture()
def repo(firestore: FakeFirestore) -> UserRepository:
    return UserRepository(firestore, "userdata")


@pytest.fixture()
def bot() -> FakeBot:
    return FakeBot()


@pytest.fixture()
def notifier(bot: FakeBot) -> AdminNotifier:
    return AdminNotifier(bot, "1000")


@pytest.fixture()
def valid_payload() -> dict:
    return {
        "id": "u1",
        "name": "Ann",
        "email": "ann@example.com",
        "mobile": "+15551234567",
        "checkbox1": True,
    }


@pytest.fixture(autouse=True)
def _reset_bot_limiter():
    bot_limiter.reset()
    yield
    bot_limiter.reset()
