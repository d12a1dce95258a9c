"""REST API for teachreg."""

from teachreg.api.app import app, create_app
from teachreg.api.models import (
    CommonStudentsResponse,
    ErrorResponse,
    NotificationRequest,
    RecipientsResponse,
    RegisterRequest,
    SuspendRequest,
)

__all__ = [
    "CommonStudentsResponse",
    "ErrorResponse",
    "NotificationRequest",
    "RecipientsResponse",
    "RegisterRequest",
    "SuspendRequest",
    "app",
    "create_app",
]
