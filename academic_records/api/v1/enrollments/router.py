from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.core.schemas import ApiResponse
from academic_records.db.session import get_db

from .schemas import EnrollmentCreate, EnrollmentResponse
from . import service

router = APIRouter(prefix="/api/v1/enrollments", tags=["enrollments"])


@router.post(
    "",
    response_model=ApiResponse[EnrollmentResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_student(
    payload: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Enroll a student in a subject. A repeated pair answers 409 with the existing enrollment."""
    enrollment = await service.enroll_student(db, payload)
    return ApiResponse(message="Student enrolled successfully.", result=enrollment)
