"""Student endpoints."""

from fastapi import APIRouter, status

from teachreg.api.dependencies import RegistrationStoreDep
from teachreg.api.models import ErrorResponse, SuspendRequest

router = APIRouter(tags=["students"])


@router.post(
    "/suspend",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def suspend(body: SuspendRequest, store: RegistrationStoreDep) -> None:
    """Suspend a student."""
    store.suspend(body.student)
