"""Registration Store - Persistent teacher/student registrations."""

from teachreg.registry.emails import extract_mentions, is_valid_email, validate_email
from teachreg.registry.exceptions import (
    NotFoundError,
    RegistryError,
    StorageError,
    StudentNotFoundError,
    TeacherNotFoundError,
    ValidationError,
)
from teachreg.registry.models import Registration, Student, Teacher
from teachreg.registry.store import RegistrationStore

__all__ = [
    "NotFoundError",
    "Registration",
    "RegistrationStore",
    "RegistryError",
    "StorageError",
    "Student",
    "StudentNotFoundError",
    "Teacher",
    "TeacherNotFoundError",
    "ValidationError",
    "extract_mentions",
    "is_valid_email",
    "validate_email",
]
