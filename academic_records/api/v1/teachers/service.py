from typing import Any, List, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.subjects.schemas import SubjectSummary
from academic_records.core.exceptions import ConflictError, NotFoundError
from academic_records.core.logging import get_logger
from academic_records.core.models import Teacher
from academic_records.core.validation import validate_input
from academic_records.db.repositories import TeacherRepository

from .schemas import TeacherCreate, TeacherResponse, TeacherUpdate

logger = get_logger(__name__)

_IN_USE_MESSAGE = "The teacher cannot be deleted because it is assigned to one or more subjects."


def _to_response(t: Teacher) -> TeacherResponse:
    return TeacherResponse(
        id=t.id,
        name=t.name,
        surname=t.surname,
        specialty=t.specialty,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


async def _get_or_404(teachers: TeacherRepository, teacher_id: int) -> Teacher:
    obj = await teachers.find_by_id(teacher_id)
    if not obj:
        raise NotFoundError("Teacher not found.")
    return obj


async def register_teacher(db: AsyncSession, payload: Union[TeacherCreate, Any]) -> TeacherResponse:
    payload = validate_input(TeacherCreate, payload)
    teachers = TeacherRepository(db)
    try:
        obj = await teachers.create(
            name=payload.name,
            surname=payload.surname,
            specialty=payload.specialty,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Teacher insert rejected by store", error=str(e.orig))
        raise ConflictError("Could not register the teacher: a record with those unique values already exists.")
    logger.info("Teacher registered", teacher_id=obj.id)
    return _to_response(obj)


async def list_teachers(db: AsyncSession) -> List[TeacherResponse]:
    rows = await TeacherRepository(db).find_all()
    return [_to_response(t) for t in rows]


async def get_teacher(db: AsyncSession, teacher_id: int) -> TeacherResponse:
    return _to_response(await _get_or_404(TeacherRepository(db), teacher_id))


async def update_teacher(
    db: AsyncSession,
    teacher_id: int,
    payload: Union[TeacherUpdate, Any],
) -> Tuple[TeacherResponse, bool]:
    payload = validate_input(TeacherUpdate, payload)
    teachers = TeacherRepository(db)
    obj = await _get_or_404(teachers, teacher_id)
    try:
        changes = await teachers.update(
            obj,
            {"name": payload.name, "surname": payload.surname, "specialty": payload.specialty},
        )
        if not changes:
            return _to_response(obj), False
        await db.commit()
        await db.refresh(obj)
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Teacher update rejected by store", teacher_id=teacher_id, error=str(e.orig))
        raise ConflictError("Could not update the teacher: a record with those unique values already exists.")
    logger.info("Teacher updated", teacher_id=teacher_id, fields=sorted(changes))
    return _to_response(obj), True


async def delete_teacher(db: AsyncSession, teacher_id: int) -> None:
    """Blocked while any subject references the teacher; never cascades."""
    teachers = TeacherRepository(db)
    await _get_or_404(teachers, teacher_id)
    if await teachers.has_subjects(teacher_id):
        raise ConflictError(_IN_USE_MESSAGE)
    try:
        deleted = await teachers.delete_by_id(teacher_id)
        await db.commit()
    except IntegrityError as e:
        # A subject was assigned between the check and the delete.
        await db.rollback()
        logger.warning("Teacher delete rejected by store", teacher_id=teacher_id, error=str(e.orig))
        raise ConflictError(_IN_USE_MESSAGE)
    if not deleted:
        raise NotFoundError("Teacher not found or already deleted.")
    logger.info("Teacher deleted", teacher_id=teacher_id)


async def list_taught_subjects(db: AsyncSession, teacher_id: int) -> Tuple[TeacherResponse, List[SubjectSummary]]:
    teachers = TeacherRepository(db)
    teacher = await _get_or_404(teachers, teacher_id)
    subjects = await teachers.find_taught_subjects(teacher_id)
    return _to_response(teacher), [SubjectSummary.model_validate(s) for s in subjects]
