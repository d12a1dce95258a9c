"""Notification endpoints."""

from fastapi import APIRouter

from teachreg.api.dependencies import RegistrationStoreDep
from teachreg.api.models import ErrorResponse, NotificationRequest, RecipientsResponse

router = APIRouter(tags=["notifications"])


@router.post(
    "/retrievefornotifications",
    response_model=RecipientsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def retrieve_for_notifications(
    body: NotificationRequest, store: RegistrationStoreDep
) -> RecipientsResponse:
    """List the students who should receive a teacher's notification."""
    recipients = store.retrieve_for_notifications(body.teacher, body.notification)
    return RecipientsResponse(recipients=recipients)
