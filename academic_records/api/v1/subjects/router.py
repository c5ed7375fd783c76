from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.core.schemas import ApiResponse, DeletedResult
from academic_records.db.session import get_db

from .schemas import AssignTeacher, SubjectCreate, SubjectDetails, SubjectResponse, SubjectUpdate
from . import service

router = APIRouter(prefix="/api/v1/subjects", tags=["subjects"])


@router.post(
    "",
    response_model=ApiResponse[SubjectResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_subject(
    payload: SubjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a subject, optionally assigning an existing teacher."""
    subject = await service.create_subject(db, payload)
    return ApiResponse(message="Subject created successfully.", result=subject)


@router.get(
    "",
    response_model=ApiResponse[List[SubjectResponse]],
    response_model_exclude_unset=True,
)
async def list_subjects(db: AsyncSession = Depends(get_db)):
    subjects = await service.list_subjects(db)
    return ApiResponse(message="Subject list retrieved.", result=subjects)


@router.get(
    "/{subject_id}",
    response_model=ApiResponse[SubjectDetails],
    response_model_exclude_unset=True,
)
async def get_subject_details(subject_id: int, db: AsyncSession = Depends(get_db)):
    """Subject with its assigned teacher and enrolled students."""
    subject = await service.get_subject_details(db, subject_id)
    return ApiResponse(message="Subject details retrieved.", result=subject)


@router.put(
    "/{subject_id}",
    response_model=ApiResponse[SubjectResponse],
    response_model_exclude_unset=True,
)
async def update_subject(
    subject_id: int,
    payload: SubjectUpdate,
    db: AsyncSession = Depends(get_db),
):
    subject, changed = await service.update_subject(db, subject_id, payload)
    message = "Subject updated successfully." if changed else "No changes were made (same data?)."
    return ApiResponse(message=message, result=subject)


@router.delete(
    "/{subject_id}",
    response_model=ApiResponse[DeletedResult],
    response_model_exclude_unset=True,
)
async def delete_subject(subject_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_subject(db, subject_id)
    return ApiResponse(message="Subject deleted successfully.", result=DeletedResult(id=subject_id))


@router.post(
    "/{subject_id}/assign-teacher",
    response_model=ApiResponse[SubjectResponse],
    response_model_exclude_unset=True,
)
async def assign_teacher(
    subject_id: int,
    payload: AssignTeacher,
    db: AsyncSession = Depends(get_db),
):
    subject = await service.assign_teacher(db, subject_id, payload)
    teacher = subject.assigned_teacher
    return ApiResponse(
        message=f"Teacher {teacher.name} {teacher.surname} assigned to subject {subject.name}.",
        result=subject,
    )
