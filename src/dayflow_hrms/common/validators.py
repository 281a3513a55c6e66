from __future__ import annotations

import re
from datetime import MAXYEAR, MINYEAR
from typing import Optional

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def require_strong_password(password: Optional[str]) -> str:
    """Password policy: length, upper, lower, digit and special character."""
    require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number")
    if not _SPECIAL_RE.search(password):
        raise ValidationError("Password must contain at least one special character")
    return password


def require_month(month: int) -> int:
    if int(month) < 1 or int(month) > 12:
        raise ValidationError("Month must be between 1 and 12")
    return int(month)


def require_year(year: int) -> int:
    if int(year) < MINYEAR or int(year) > MAXYEAR:
        raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR}")
    return int(year)


def non_negative_number(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number
