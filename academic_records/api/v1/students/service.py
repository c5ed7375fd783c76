from typing import Any, List, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.subjects.schemas import SubjectSummary
from academic_records.core.exceptions import ConflictError, NotFoundError
from academic_records.core.logging import get_logger
from academic_records.core.models import Student
from academic_records.core.validation import validate_input
from academic_records.db.repositories import StudentRepository

from .schemas import StudentCreate, StudentResponse, StudentUpdate

logger = get_logger(__name__)


def _to_response(s: Student) -> StudentResponse:
    return StudentResponse(
        id=s.id,
        name=s.name,
        surname=s.surname,
        email=s.email,
        address=s.address,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


async def _get_or_404(students: StudentRepository, student_id: int) -> Student:
    obj = await students.find_by_id(student_id)
    if not obj:
        raise NotFoundError("Student not found.")
    return obj


async def register_student(db: AsyncSession, payload: Union[StudentCreate, Any]) -> StudentResponse:
    payload = validate_input(StudentCreate, payload)
    students = StudentRepository(db)
    email = str(payload.email)
    if await students.find_by_email(email):
        raise ConflictError("The email provided is already registered.")
    try:
        obj = await students.create(
            name=payload.name,
            surname=payload.surname,
            email=email,
            address=payload.address,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Student insert rejected by store", error=str(e.orig))
        raise ConflictError("Could not register: the email already exists.")
    logger.info("Student registered", student_id=obj.id)
    return _to_response(obj)


async def list_students(db: AsyncSession) -> List[StudentResponse]:
    rows = await StudentRepository(db).find_all()
    return [_to_response(s) for s in rows]


async def get_student(db: AsyncSession, student_id: int) -> StudentResponse:
    return _to_response(await _get_or_404(StudentRepository(db), student_id))


async def update_student(
    db: AsyncSession,
    student_id: int,
    payload: Union[StudentUpdate, Any],
) -> Tuple[StudentResponse, bool]:
    """Returns the record and whether anything actually changed."""
    payload = validate_input(StudentUpdate, payload)
    students = StudentRepository(db)
    obj = await _get_or_404(students, student_id)
    email = str(payload.email)
    if email != obj.email and await students.find_by_email(email, exclude_id=student_id):
        raise ConflictError("The new email is already registered by another student.")
    try:
        changes = await students.update(
            obj,
            {
                "name": payload.name,
                "surname": payload.surname,
                "email": email,
                "address": payload.address,
            },
        )
        if not changes:
            return _to_response(obj), False
        await db.commit()
        await db.refresh(obj)
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Student update rejected by store", student_id=student_id, error=str(e.orig))
        raise ConflictError("Could not update: the email already exists.")
    logger.info("Student updated", student_id=student_id, fields=sorted(changes))
    return _to_response(obj), True


async def delete_student(db: AsyncSession, student_id: int) -> None:
    """Enrollments of the student are removed by the store's ON DELETE CASCADE."""
    students = StudentRepository(db)
    await _get_or_404(students, student_id)
    try:
        deleted = await students.delete_by_id(student_id)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Student delete rejected by store", student_id=student_id, error=str(e.orig))
        raise ConflictError("The student cannot be deleted because it has associated enrollments.")
    if not deleted:
        raise NotFoundError("Student not found or already deleted.")
    logger.info("Student deleted", student_id=student_id)


async def list_enrolled_subjects(db: AsyncSession, student_id: int) -> Tuple[StudentResponse, List[SubjectSummary]]:
    students = StudentRepository(db)
    student = await _get_or_404(students, student_id)
    subjects = await students.find_enrolled_subjects(student_id)
    return _to_response(student), [SubjectSummary.model_validate(s) for s in subjects]
