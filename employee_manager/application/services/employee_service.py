"""Employee service: business logic for employee records and their pictures.

Picture files are not transactional with the store. A picture saved during
a request is removed again on every failure path, and a replaced or deleted
employee's old picture is only removed once the store write has succeeded.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, List, Mapping, Optional

import structlog
from fastapi import UploadFile

from employee_manager.core.exceptions import ConflictError, NotFoundError, ValidationError
from employee_manager.domain.models.employee import Employee
from employee_manager.domain.repositories.employee_repository import EmployeeRepository
from employee_manager.domain.schemas.employee import EmployeeInput
from employee_manager.domain.validation import validate_employee, validate_search
from employee_manager.infrastructure.file_storage import PictureStorage

logger = structlog.get_logger(__name__)

NOT_FOUND = "Employee not found"
EMAIL_TAKEN = "Employee with this email already exists"


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, pictures: PictureStorage):
        self.employees = employees
        self.pictures = pictures

    def validate(self, form: Mapping[str, Any], picture: Optional[UploadFile] = None) -> EmployeeInput:
        """Field and picture checks, reported together."""
        errors = []
        data = None
        try:
            data = validate_employee(form)
        except ValidationError as exc:
            errors.extend(exc.errors)
        if picture is not None:
            errors.extend(self.pictures.check(picture))
        if errors:
            raise ValidationError(errors)
        return data

    @contextmanager
    def discard_on_failure(self, ref: Optional[str]) -> Iterator[None]:
        try:
            yield
        except BaseException:
            if ref:
                self.pictures.delete(ref)
            raise

    async def create(self, form: Mapping[str, Any], picture: Optional[UploadFile] = None) -> Employee:
        data = self.validate(form, picture)

        if await self.employees.get_by_email(data.email):
            raise ConflictError(EMAIL_TAKEN, field="email")

        ref = await self.pictures.save(picture) if picture is not None else ""
        with self.discard_on_failure(ref):
            employee = Employee(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone_number=data.phone_number,
                department=data.department,
                position=data.position,
                salary=data.salary,
                profile_picture=ref,
            )
            if data.date_of_joining is not None:
                employee.date_of_joining = data.date_of_joining
            employee = await self.employees.create(employee)

        logger.info("Employee created", employee_id=employee.id, email=employee.email)
        return employee

    async def list_all(self) -> List[Employee]:
        return await self.employees.list()

    async def search(self, department: Optional[str] = None, position: Optional[str] = None) -> List[Employee]:
        criteria = validate_search(department, position)
        return await self.employees.search(department=criteria.department, position=criteria.position)

    async def get(self, id: str) -> Employee:
        employee = await self.employees.get_by_id(id)
        if employee is None:
            raise NotFoundError(NOT_FOUND)
        return employee

    async def update(self, id: str, form: Mapping[str, Any], picture: Optional[UploadFile] = None) -> Employee:
        data = self.validate(form, picture)
        current = await self.get(id)

        if data.email != current.email and await self.employees.get_by_email(data.email, exclude_id=id):
            raise ConflictError(EMAIL_TAKEN, field="email")

        new_ref = await self.pictures.save(picture) if picture is not None else None
        with self.discard_on_failure(new_ref):
            updated = await self.employees.replace(id, Employee(
                id=current.id,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone_number=data.phone_number,
                department=data.department,
                position=data.position,
                salary=data.salary,
                profile_picture=new_ref or current.profile_picture,
                date_of_joining=data.date_of_joining or current.date_of_joining,
                created_at=current.created_at,
                updated_at=datetime.now(timezone.utc),
            ))
            if updated is None:
                # Deleted by another request in the meantime
                raise NotFoundError(NOT_FOUND)

        if new_ref and current.profile_picture and current.profile_picture != new_ref:
            self.pictures.delete(current.profile_picture)

        logger.info("Employee updated", employee_id=id)
        return updated

    async def delete(self, id: str) -> Employee:
        employee = await self.employees.delete(id)
        if employee is None:
            raise NotFoundError(NOT_FOUND)
        if employee.profile_picture:
            self.pictures.delete(employee.profile_picture)
        logger.info("Employee deleted", employee_id=id)
        return employee
