"""
Fixtures compartidas: repositorios en memoria, reloj controlable y cliente de IA simulado.

Ningún test necesita MongoDB ni red. Los fakes implementan los mismos métodos
asíncronos que `UserRepository`/`NoteRepository`.
"""
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from argon2 import PasswordHasher
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from marksense.container import ServiceContainer  # noqa: E402
from marksense.main import create_app  # noqa: E402
from marksense.services.ai_service import AIService  # noqa: E402
from marksense.services.auth_service import AuthService  # noqa: E402
from marksense.services.note_service import NoteService  # noqa: E402
from marksense.services.token_service import TokenService  # noqa: E402

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Reloj manual; con `step` avanza en cada lectura (orden determinista)."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(0)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return next((dict(d) for d in self.docs.values() if d["email"] == email), None)

    async def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return next((dict(d) for d in self.docs.values() if d["username"] == username), None)

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(user_id):
            return None
        doc = self.docs.get(ObjectId(user_id))
        return dict(doc) if doc else None

    async def insert(self, doc: Dict[str, Any]) -> str:
        for field in ("email", "username"):
            if any(d[field] == doc[field] for d in self.docs.values()):
                raise DuplicateKeyError(
                    f"E11000 duplicate key error dup key: {{ {field}: ... }}",
                    code=11000,
                    details={"keyPattern": {field: 1}},
                )
        oid = ObjectId()
        self.docs[oid] = {**doc, "_id": oid}
        return str(oid)


class InMemoryNoteRepository:
    def __init__(self) -> None:
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}

    def _owned(self, note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(note_id):
            return None
        doc = self.docs.get(ObjectId(note_id))
        if doc is None or doc["user_id"] != user_id:
            return None
        return doc

    async def list_by_owner(self, user_id: str) -> List[Dict[str, Any]]:
        docs = [dict(d) for d in self.docs.values() if d["user_id"] == user_id]
        return sorted(docs, key=lambda d: d["updated_at"], reverse=True)

    async def get_owned(self, note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self._owned(note_id, user_id)
        return dict(doc) if doc else None

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        oid = ObjectId()
        self.docs[oid] = {**doc, "_id": oid}
        return dict(self.docs[oid])

    async def update_owned(self, note_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._owned(note_id, user_id)
        if doc is None:
            return None
        doc.update(fields)
        return dict(doc)

    async def delete_owned(self, note_id: str, user_id: str) -> bool:
        doc = self._owned(note_id, user_id)
        if doc is None:
            return False
        del self.docs[doc["_id"]]
        return True


def completion(text: Optional[str]) -> SimpleNamespace:
    """Respuesta con la forma de `chat.completions.create` de OpenAI."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def clock():
    return FakeClock(step=timedelta(seconds=1))


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def note_repo():
    return InMemoryNoteRepository()


@pytest.fixture
def token_service(clock):
    return TokenService(secret="test-secret", expires_in=timedelta(days=7), clock=clock)


@pytest.fixture
def auth_service(user_repo, token_service):
    # Parámetros mínimos de argon2 para que los tests sean rápidos
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    return AuthService(user_repo, token_service, hasher=hasher)


@pytest.fixture
def note_service(note_repo, clock):
    return NoteService(note_repo, clock=clock)


@pytest.fixture
def ai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("ok"))
    return client


@pytest.fixture
def ai_service(ai_client):
    return AIService(ai_client, "test-model")


@pytest.fixture
def client(auth_service, note_service, ai_service):
    """TestClient sobre una app con el contenedor de fakes."""
    container = ServiceContainer(auth=auth_service, notes=note_service, ai=ai_service)
    app = create_app(container=container)
    with TestClient(app) as c:
        yield c


def register(client: TestClient, username: str, email: str, password: str = "secret123") -> Dict[str, Any]:
    r = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def auth_header(client):
    body = register(client, "alice", "alice@example.com")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def second_auth_header(client):
    body = register(client, "bob", "bob@example.com")
    return {"Authorization": f"Bearer {body['token']}"}
