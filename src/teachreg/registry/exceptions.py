"""Custom exceptions for the Registration Store."""


class RegistryError(Exception):
    """Base exception for Registration Store errors."""


class ValidationError(RegistryError):
    """Malformed input, such as a badly shaped email address."""


class NotFoundError(RegistryError):
    """A referenced entity does not exist where existence is required."""


class TeacherNotFoundError(NotFoundError):
    """Teacher with given email does not exist."""


class StudentNotFoundError(NotFoundError):
    """Student with given email does not exist."""


class StorageError(RegistryError):
    """Unexpected failure from the persistence layer."""
