"""Pydantic schemas for the Employee domain."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from employee_manager.domain.schemas.fields import Email, OptionalDateTime, Salary, required_text

FirstName = required_text("First name is required")
LastName = required_text("Last name is required")
PhoneNumber = required_text("Phone number is required")
Department = required_text("Department is required")
Position = required_text("Position is required")


class EmployeeInput(BaseModel):
    """A complete employee record as submitted by a create or update form."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="ignore",
    )

    first_name: FirstName = None
    last_name: LastName = None
    email: Email = None
    phone_number: PhoneNumber = None
    department: Department = None
    position: Position = None
    salary: Salary = None
    date_of_joining: OptionalDateTime = None


class EmployeeSearch(BaseModel):
    department: Optional[str] = None
    position: Optional[str] = None


class EmployeeRead(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    department: str
    position: str
    salary: float
    profile_picture: str = ""
    date_of_joining: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EmployeeResponse(BaseModel):
    message: str
    employee: EmployeeRead


class MessageResponse(BaseModel):
    message: str
