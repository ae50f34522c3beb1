"""
Validation helpers shared by entities and services.
"""

import re
from typing import Any, Optional

from .exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

# e.g. CS101, MATH201
COURSE_CODE_PATTERN = re.compile(r"^[A-Z]{2,5}\d{3}$")

# e.g. 2023CSE001
REG_NUMBER_PATTERN = re.compile(r"^\d{4}[A-Z]{3}\d{3}$")

MIN_CREDITS = 1
MAX_CREDITS = 6
MIN_YEAR = 1
MAX_YEAR = 4


def is_null_or_empty(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def is_valid_id(value: Optional[str]) -> bool:
    return not is_null_or_empty(value)


def is_valid_email(email: Optional[str]) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def is_valid_course_code(course_code: Optional[str]) -> bool:
    return isinstance(course_code, str) and COURSE_CODE_PATTERN.match(course_code) is not None


def is_valid_registration_number(reg_number: Optional[str]) -> bool:
    return isinstance(reg_number, str) and REG_NUMBER_PATTERN.match(reg_number) is not None


def is_valid_credit_range(credits: Any) -> bool:
    return _is_int(credits) and MIN_CREDITS <= credits <= MAX_CREDITS


def is_valid_year(year: Any) -> bool:
    return _is_int(year) and MIN_YEAR <= year <= MAX_YEAR


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_text(value: Optional[str], field_name: str) -> str:
    """Return ``value`` or raise ValidationError if it is missing or blank."""
    if is_null_or_empty(value):
        raise ValidationError(f"{field_name} cannot be empty", error_code="MISSING_REQUIRED_FIELD")
    return value


def require_email(email: Optional[str]) -> str:
    if not is_valid_email(email):
        raise ValidationError(f"Invalid email format: {email!r}", error_code="INVALID_FIELD_VALUE")
    return email


def require_registration_number(reg_number: Optional[str]) -> str:
    if not is_valid_registration_number(reg_number):
        raise ValidationError(
            f"Invalid registration number format: {reg_number!r}",
            error_code="INVALID_FIELD_VALUE",
        )
    return reg_number


def require_year(year: Any) -> int:
    if not is_valid_year(year):
        raise ValidationError(
            f"Year must be between {MIN_YEAR} and {MAX_YEAR}", error_code="INVALID_FIELD_VALUE"
        )
    return year


def require_credits(credits: Any) -> int:
    if not is_valid_credit_range(credits):
        raise ValidationError(
            f"Credits must be between {MIN_CREDITS} and {MAX_CREDITS}", error_code="INVALID_FIELD_VALUE"
        )
    return credits
