"""Pydantic models for REST API."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str


# Registration models


class RegisterRequest(BaseModel):
    """Request model for registering students to a teacher."""

    teacher: str = Field(..., min_length=1)
    students: list[str] = Field(..., min_length=1)


class CommonStudentsResponse(BaseModel):
    """Response model for students common to a set of teachers."""

    students: list[str]


# Student models


class SuspendRequest(BaseModel):
    """Request model for suspending a student."""

    student: str = Field(..., min_length=1)


# Notification models


class NotificationRequest(BaseModel):
    """Request model for computing notification recipients."""

    teacher: str = Field(..., min_length=1)
    notification: str


class RecipientsResponse(BaseModel):
    """Response model for notification recipients."""

    recipients: list[str]
