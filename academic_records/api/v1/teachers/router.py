from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.subjects.schemas import SubjectSummary
from academic_records.core.schemas import ApiResponse, DeletedResult
from academic_records.db.session import get_db

from .schemas import TeacherCreate, TeacherResponse, TeacherUpdate
from . import service

router = APIRouter(prefix="/api/v1/teachers", tags=["teachers"])


@router.post(
    "",
    response_model=ApiResponse[TeacherResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_teacher(
    payload: TeacherCreate,
    db: AsyncSession = Depends(get_db),
):
    teacher = await service.register_teacher(db, payload)
    return ApiResponse(message="Teacher registered successfully.", result=teacher)


@router.get(
    "",
    response_model=ApiResponse[List[TeacherResponse]],
    response_model_exclude_unset=True,
)
async def list_teachers(db: AsyncSession = Depends(get_db)):
    """Teachers ordered by surname, then name."""
    teachers = await service.list_teachers(db)
    return ApiResponse(message="Teacher list retrieved.", result=teachers)


@router.get(
    "/{teacher_id}",
    response_model=ApiResponse[TeacherResponse],
    response_model_exclude_unset=True,
)
async def get_teacher(teacher_id: int, db: AsyncSession = Depends(get_db)):
    teacher = await service.get_teacher(db, teacher_id)
    return ApiResponse(message="Teacher found.", result=teacher)


@router.put(
    "/{teacher_id}",
    response_model=ApiResponse[TeacherResponse],
    response_model_exclude_unset=True,
)
async def update_teacher(
    teacher_id: int,
    payload: TeacherUpdate,
    db: AsyncSession = Depends(get_db),
):
    teacher, changed = await service.update_teacher(db, teacher_id, payload)
    message = "Teacher updated successfully." if changed else "No changes were made (same data?)."
    return ApiResponse(message=message, result=teacher)


@router.delete(
    "/{teacher_id}",
    response_model=ApiResponse[DeletedResult],
    response_model_exclude_unset=True,
)
async def delete_teacher(teacher_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_teacher(db, teacher_id)
    return ApiResponse(message="Teacher deleted successfully.", result=DeletedResult(id=teacher_id))


@router.get(
    "/{teacher_id}/subjects",
    response_model=ApiResponse[List[SubjectSummary]],
    response_model_exclude_unset=True,
)
async def list_taught_subjects(teacher_id: int, db: AsyncSession = Depends(get_db)):
    teacher, subjects = await service.list_taught_subjects(db, teacher_id)
    return ApiResponse(
        message=f"Subjects taught by teacher {teacher.name} {teacher.surname}.",
        result=subjects,
    )
