"""
Services module containing the records rule engine and the course catalog.
"""

from .course_catalog import CourseCatalog
from .records_service import EnrollmentResult, RecordsService

__all__ = [
    "CourseCatalog",
    "EnrollmentResult",
    "RecordsService",
]
