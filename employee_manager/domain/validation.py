"""
Input validation.
Pure functions from raw request data to validated schemas. Every failing
field is reported at once through a single ValidationError; nothing here
touches the store.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from employee_manager.core.exceptions import FieldError, ValidationError
from employee_manager.domain.schemas.auth import LoginRequest, SignupRequest
from employee_manager.domain.schemas.employee import EmployeeInput, EmployeeSearch

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def field_errors(schema: Type[BaseModel], exc: pydantic.ValidationError) -> List[FieldError]:
    """Flatten pydantic errors into `{field, message}` pairs named as the client sent them."""
    errors: List[FieldError] = []
    for err in exc.errors():
        loc = err.get("loc") or ("body",)
        name = str(loc[0])
        model_field = schema.model_fields.get(name)
        if model_field is not None and model_field.alias:
            name = model_field.alias
        errors.append({"field": name, "message": err["msg"]})
    return errors


def validate(schema: Type[SchemaT], raw: Optional[Mapping[str, Any]]) -> SchemaT:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValidationError([{"field": "body", "message": "Request body must be an object"}])
    try:
        return schema.model_validate(dict(raw))
    except pydantic.ValidationError as exc:
        raise ValidationError(field_errors(schema, exc)) from None


def validate_signup(raw: Optional[Mapping[str, Any]]) -> SignupRequest:
    return validate(SignupRequest, raw)


def validate_login(raw: Optional[Mapping[str, Any]]) -> LoginRequest:
    return validate(LoginRequest, raw)


def validate_employee(raw: Optional[Mapping[str, Any]]) -> EmployeeInput:
    return validate(EmployeeInput, raw)


def validate_search(department: Optional[str], position: Optional[str]) -> EmployeeSearch:
    """At least one criterion is required; blank values count as absent."""
    department = department.strip() if department else None
    position = position.strip() if position else None
    if not department and not position:
        raise ValidationError(
            [{"field": "query", "message": "Please provide department or position to search"}],
            message="Please provide department or position to search",
        )
    return EmployeeSearch(department=department or None, position=position or None)
