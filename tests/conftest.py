"""
Pytest fixtures: an in-memory store that honours the repository contracts
(unique emails and usernames, newest-first ordering, malformed ids behave
as missing) so the API can be exercised end to end without MongoDB.
"""

from dataclasses import replace
from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from employee_manager.config import Settings
from employee_manager.core.exceptions import ConflictError, StoreUnavailableError
from employee_manager.domain.models.employee import Employee
from employee_manager.domain.models.user import User
from employee_manager.infrastructure.database import ReadyState
from employee_manager.main import create_app


class InMemoryRepository:
    entity_name = "Record"
    unique_fields = ("email",)

    def __init__(self, store: "FakeStore"):
        self.store = store
        self.records: Dict[str, object] = {}
        self.calls = 0

    def _touch(self):
        self.calls += 1
        if self.store.unreachable:
            raise StoreUnavailableError()

    def _check_unique(self, obj, exclude_id: Optional[str] = None):
        for field in self.unique_fields:
            for other in self.records.values():
                if other.id != exclude_id and getattr(other, field) == getattr(obj, field):
                    raise ConflictError(f"{self.entity_name} with this {field} already exists", field=field)

    def _newest_first(self, items) -> List:
        # Reverse insertion order first so equal timestamps stay newest-first
        return sorted(reversed(list(items)), key=lambda r: r.created_at, reverse=True)

    async def get_by_id(self, id: str):
        self._touch()
        if not isinstance(id, str) or not ObjectId.is_valid(id):
            return None
        return self.records.get(id)

    async def list(self):
        self._touch()
        return self._newest_first(self.records.values())

    async def create(self, obj):
        self._touch()
        self._check_unique(obj)
        created = replace(obj, id=str(ObjectId()))
        self.records[created.id] = created
        return created

    async def replace(self, id: str, obj):
        self._touch()
        if id not in self.records:
            return None
        self._check_unique(obj, exclude_id=id)
        updated = replace(obj, id=id, created_at=self.records[id].created_at)
        self.records[id] = updated
        return updated

    async def delete(self, id: str):
        self._touch()
        return self.records.pop(id, None)


class InMemoryUserRepository(InMemoryRepository):
    entity_name = "User"
    unique_fields = ("username", "email")

    async def get_by_email(self, email: str) -> Optional[User]:
        self._touch()
        return next((u for u in self.records.values() if u.email == email), None)

    async def get_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        self._touch()
        return next((u for u in self.records.values() if u.email == email or u.username == username), None)


class InMemoryEmployeeRepository(InMemoryRepository):
    entity_name = "Employee"

    async def get_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Employee]:
        self._touch()
        return next((e for e in self.records.values() if e.email == email and e.id != exclude_id), None)

    async def search(self, department: Optional[str] = None, position: Optional[str] = None) -> List[Employee]:
        self._touch()
        matches = [
            e for e in self.records.values()
            if (not department or department.lower() in e.department.lower())
            and (not position or position.lower() in e.position.lower())
        ]
        return self._newest_first(matches)


class FakeStore:
    def __init__(self):
        self.ready_state = ReadyState.DISCONNECTED
        self.unreachable = False
        self.user_repo = InMemoryUserRepository(self)
        self.employee_repo = InMemoryEmployeeRepository(self)

    async def connect(self) -> bool:
        self.ready_state = ReadyState.CONNECTED
        return True

    async def close(self) -> None:
        self.ready_state = ReadyState.DISCONNECTED

    def users(self) -> InMemoryUserRepository:
        return self.user_repo

    def employees(self) -> InMemoryEmployeeRepository:
        return self.employee_repo


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SECRET_KEY="test-secret-key",
        MONGO_CONNECT_RETRIES=1,
        MAX_UPLOAD_SIZE_MB=1,
    )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    response = client.post(
        "/auth/signup",
        json={"username": "hradmin", "email": "hr@x.com", "password": "secret1"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def employee_form() -> Dict[str, str]:
    return {
        "firstName": "Jo",
        "lastName": "Lee",
        "email": "jo@x.com",
        "phoneNumber": "555",
        "department": "IT",
        "position": "Developer",
        "salary": "50000",
    }


PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
    b"\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00"
    b"\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def png_file():
    return ("face.png", PNG_BYTES, "image/png")
