from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.subjects.schemas import SubjectSummary
from academic_records.core.schemas import ApiResponse, DeletedResult
from academic_records.db.session import get_db

from .schemas import StudentCreate, StudentResponse, StudentUpdate
from . import service

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
):
    student = await service.register_student(db, payload)
    return ApiResponse(message="Student registered successfully.", result=student)


@router.get(
    "",
    response_model=ApiResponse[List[StudentResponse]],
    response_model_exclude_unset=True,
)
async def list_students(db: AsyncSession = Depends(get_db)):
    """Students ordered by surname, then name."""
    students = await service.list_students(db)
    return ApiResponse(message="Student list retrieved.", result=students)


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    response_model_exclude_unset=True,
)
async def get_student(student_id: int, db: AsyncSession = Depends(get_db)):
    student = await service.get_student(db, student_id)
    return ApiResponse(message="Student found.", result=student)


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    response_model_exclude_unset=True,
)
async def update_student(
    student_id: int,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
):
    student, changed = await service.update_student(db, student_id, payload)
    message = "Student updated successfully." if changed else "No changes were made (same data?)."
    return ApiResponse(message=message, result=student)


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[DeletedResult],
    response_model_exclude_unset=True,
)
async def delete_student(student_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_student(db, student_id)
    return ApiResponse(message="Student deleted successfully.", result=DeletedResult(id=student_id))


@router.get(
    "/{student_id}/subjects",
    response_model=ApiResponse[List[SubjectSummary]],
    response_model_exclude_unset=True,
)
async def list_enrolled_subjects(student_id: int, db: AsyncSession = Depends(get_db)):
    student, subjects = await service.list_enrolled_subjects(db, student_id)
    return ApiResponse(
        message=f"Subjects enrolled by student {student.name} {student.surname}.",
        result=subjects,
    )
