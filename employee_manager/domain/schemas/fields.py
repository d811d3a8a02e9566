"""Reusable annotated field types shared by the request schemas.

Each validator raises a `PydanticCustomError` so the message reaches the
client verbatim (no "Value error," prefix).
"""

import re
from datetime import date, datetime, time, timezone
from functools import partial
from typing import Annotated, Optional

from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _required(value, *, message: str, strip: bool):
    if value is None or not isinstance(value, str):
        raise PydanticCustomError("required", message)
    cleaned = value.strip()
    if not cleaned:
        raise PydanticCustomError("required", message)
    return cleaned if strip else value


def _email(value):
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
        raise PydanticCustomError("email", "Please enter a valid email")
    return normalize_email(value)


def _salary(value):
    if isinstance(value, bool) or value is None:
        raise PydanticCustomError("salary_type", "Salary must be a number")
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise PydanticCustomError("salary_type", "Salary must be a number")
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise PydanticCustomError("salary_type", "Salary must be a number")
    if amount < 0:
        raise PydanticCustomError("salary_range", "Salary must be a positive number")
    return amount


def _optional_datetime(value):
    """Accepts an ISO date or datetime; blank means "not supplied"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        try:
            if len(text) == 10:
                parsed = datetime.combine(date.fromisoformat(text), time.min)
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise PydanticCustomError("date", "Please enter a valid date")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def required_text(message: str, strip: bool = True):
    """A string that must be non-empty after trimming."""
    return Annotated[Optional[str], BeforeValidator(partial(_required, message=message, strip=strip))]


Email = Annotated[Optional[str], BeforeValidator(_email)]
Salary = Annotated[Optional[float], BeforeValidator(_salary)]
OptionalDateTime = Annotated[Optional[datetime], BeforeValidator(_optional_datetime)]
