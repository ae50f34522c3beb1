"""
Core module containing the domain model, validation and error taxonomy.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "AbstractEntity",
    "PersonProfile",
    "Student",
    "Instructor",
    "Course",
    "Enrollment",

    # Interfaces
    "Role",

    # Enums
    "Grade",
    "PersonType",
    "EnrollmentStatus",

    # Exceptions
    "RegistrarException",
    "ValidationError",
    "NotFoundError",
    "DuplicateIdError",
    "DuplicateRegistrationError",
    "DuplicateEnrollmentError",
    "NotEnrolledError",
    "CreditLimitExceededError",
    "RecordsIOError",
]
