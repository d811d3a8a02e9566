"""User domain model: maps to documents in the 'users' collection."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

COLLECTION = "users"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    username: str
    email: str
    password_hash: str
    id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_document(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password_hash,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]),
            username=doc["username"],
            email=doc["email"],
            password_hash=doc["password"],
            created_at=doc.get("createdAt") or _now(),
            updated_at=doc.get("updatedAt") or _now(),
        )

    def __repr__(self):
        return f"<User {self.username} <{self.email}>>"
