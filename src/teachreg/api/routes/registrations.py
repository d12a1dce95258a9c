"""Registration endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from teachreg.api.dependencies import RegistrationStoreDep
from teachreg.api.models import CommonStudentsResponse, ErrorResponse, RegisterRequest
from teachreg.registry import ValidationError

router = APIRouter(tags=["registrations"])


@router.post(
    "/register",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}},
)
def register(body: RegisterRequest, store: RegistrationStoreDep) -> None:
    """Register one or more students to a teacher."""
    store.register(body.teacher, body.students)


@router.get(
    "/commonstudents",
    response_model=CommonStudentsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def common_students(
    store: RegistrationStoreDep,
    teacher: Annotated[list[str] | None, Query()] = None,
) -> CommonStudentsResponse:
    """List students registered to all of the given teachers."""
    if not teacher:
        raise ValidationError("At least one teacher must be specified")
    return CommonStudentsResponse(students=store.common_students(teacher))
