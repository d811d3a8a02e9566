"""Pydantic schemas for User and Auth."""

from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_core import PydanticCustomError

from employee_manager.domain.schemas.fields import Email, required_text

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

# Passwords are compared as typed, surrounding whitespace included
LoginPassword = required_text("Password is required", strip=False)


def _username(value):
    text = value.strip() if isinstance(value, str) else ""
    if not USERNAME_MIN_LENGTH <= len(text) <= USERNAME_MAX_LENGTH:
        raise PydanticCustomError(
            "username_length",
            "Username must be between {min} and {max} characters",
            {"min": USERNAME_MIN_LENGTH, "max": USERNAME_MAX_LENGTH},
        )
    return text


def _new_password(value):
    if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_length",
            "Password must be at least {min} characters long",
            {"min": PASSWORD_MIN_LENGTH},
        )
    return value


class SignupRequest(BaseModel):
    model_config = ConfigDict(validate_default=True)

    username: Annotated[Optional[str], BeforeValidator(_username)] = None
    email: Email = None
    password: Annotated[Optional[str], BeforeValidator(_new_password)] = None


class LoginRequest(BaseModel):
    model_config = ConfigDict(validate_default=True)

    email: Email = None
    password: LoginPassword = None


class UserRead(BaseModel):
    """Public user fields; the password hash never leaves the service."""

    id: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    message: str
    token: str
    user: UserRead
