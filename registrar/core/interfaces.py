"""
Core interfaces for the Registrar records engine.
"""

from abc import ABC, abstractmethod

from .enums import PersonType


class Role(ABC):
    """Interface for anything that plays a person role (student, instructor)."""

    @property
    @abstractmethod
    def person_type(self) -> PersonType:
        """Get the role this person plays."""
        pass

    @property
    def role_name(self) -> str:
        return self.person_type.value

    @abstractmethod
    def display_info(self) -> str:
        """Get a one-line summary for listings and reports."""
        pass
