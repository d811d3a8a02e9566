"""Employee domain model: maps to documents in the 'employees' collection."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

COLLECTION = "employees"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Employee:
    first_name: str
    last_name: str
    email: str
    phone_number: str
    department: str
    position: str
    salary: float
    profile_picture: str = ""
    date_of_joining: datetime = field(default_factory=_now)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_document(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "department": self.department,
            "position": self.position,
            "salary": self.salary,
            "profilePicture": self.profile_picture,
            "dateOfJoining": self.date_of_joining,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Employee":
        return cls(
            id=str(doc["_id"]),
            first_name=doc["firstName"],
            last_name=doc["lastName"],
            email=doc["email"],
            phone_number=doc["phoneNumber"],
            department=doc["department"],
            position=doc["position"],
            salary=float(doc["salary"]),
            profile_picture=doc.get("profilePicture") or "",
            date_of_joining=doc.get("dateOfJoining") or _now(),
            created_at=doc.get("createdAt") or _now(),
            updated_at=doc.get("updatedAt") or _now(),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Employee {self.full_name} - {self.department}/{self.position}>"
