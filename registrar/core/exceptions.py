"""
Custom exceptions for the Registrar records engine.
"""

from typing import Optional, Any, Dict


class RegistrarException(Exception):
    """Base exception for all Registrar-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(RegistrarException):
    """Raised when data validation fails."""
    pass


class NotFoundError(RegistrarException):
    """Raised when a requested student, course or backup is not found."""
    pass


class DuplicateIdError(RegistrarException):
    """Raised when attempting to create an entity with an existing ID."""
    pass


class DuplicateRegistrationError(RegistrarException):
    """Raised when a registration number is already in use."""
    pass


class DuplicateEnrollmentError(RegistrarException):
    """Raised when a student is already enrolled in a course."""
    pass


class NotEnrolledError(RegistrarException):
    """Raised when grading a course the student is not enrolled in."""
    pass


class CreditLimitExceededError(RegistrarException):
    """Raised when an enrollment would exceed the semester credit limit."""

    def __init__(self, current_credits: int, attempted_credits: int, max_credits: int):
        super().__init__(
            f"Credit limit exceeded: Current={current_credits}, "
            f"Attempted={attempted_credits}, Max={max_credits}",
            error_code="CREDIT_LIMIT_EXCEEDED",
            details={
                "current_credits": current_credits,
                "attempted_credits": attempted_credits,
                "max_credits": max_credits,
            },
        )
        self.current_credits = current_credits
        self.attempted_credits = attempted_credits
        self.max_credits = max_credits


class RecordsIOError(RegistrarException, OSError):
    """Raised when a data file or backup directory is missing or cannot be copied."""
    pass
