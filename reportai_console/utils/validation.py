"""
Form field checks shared by the API client, the CLI and the console.
"""

import re
from typing import Any

from reportai_console.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

def require_text(value: Any, field: str) -> str:
    text = "" if value is None else str(value)
    if not text.strip():
        raise ValidationError(f"{field} is required")
    return text

def require_email(value: Any, field: str = "user_mail") -> str:
    email = require_text(value, field).strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"{field} must be a valid email address: {email}")
    return email

def require_positive_id(value: Any, field: str = "id") -> int:
    """Accept ints and numeric strings; reject bools, blanks and ids below 1."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} is required")
    try:
        number = int(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"{field} must be a whole number: {value}") from e
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return number
