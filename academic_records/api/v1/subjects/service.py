from typing import Any, List, Tuple, Union

from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.students.schemas import StudentSummary
from academic_records.api.v1.teachers.schemas import TeacherSummary
from academic_records.core.exceptions import ConflictError, InvalidInputError, NotFoundError, ServiceError
from academic_records.core.logging import get_logger
from academic_records.core.models import Subject
from academic_records.core.validation import validate_input
from academic_records.db.errors import is_foreign_key_violation
from academic_records.db.repositories import SubjectRepository, TeacherRepository

from .schemas import AssignTeacher, SubjectCreate, SubjectDetails, SubjectResponse, SubjectUpdate

logger = get_logger(__name__)


def _to_response(s: Subject) -> SubjectResponse:
    """s must come from a query that loaded Subject.teacher."""
    return SubjectResponse(
        id=s.id,
        name=s.name,
        description=s.description,
        teacher_id=s.teacher_id,
        assigned_teacher=TeacherSummary.model_validate(s.teacher) if s.teacher else None,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def _to_details(s: Subject) -> SubjectDetails:
    return SubjectDetails(
        **_to_response(s).model_dump(),
        enrolled_students=[StudentSummary.model_validate(st) for st in s.students],
    )


def _store_error(e: IntegrityError, name: str) -> ServiceError:
    """Map a store-level violation raised while writing a subject."""
    if is_foreign_key_violation(e):
        return ServiceError(
            "Foreign key error: the specified teacher does not exist.",
            status.HTTP_400_BAD_REQUEST,
        )
    return ConflictError(f"A subject named '{name}' already exists.")


async def _teacher_must_exist(db: AsyncSession, teacher_id: int) -> None:
    if not await TeacherRepository(db).find_by_id(teacher_id):
        raise NotFoundError(f"Teacher with ID {teacher_id} does not exist. It cannot be assigned.")


async def _get_or_404(subjects: SubjectRepository, subject_id: int) -> Subject:
    obj = await subjects.find_by_id(subject_id)
    if not obj:
        raise NotFoundError("Subject not found.")
    return obj


async def create_subject(
    db: AsyncSession,
    payload: Union[SubjectCreate, Any],
) -> SubjectResponse:
    payload = validate_input(SubjectCreate, payload)
    subjects = SubjectRepository(db)
    if await subjects.find_by_name(payload.name):
        raise ConflictError("A subject with that name already exists.")
    if payload.teacher_id is not None:
        await _teacher_must_exist(db, payload.teacher_id)
    try:
        obj = await subjects.create(
            name=payload.name,
            description=payload.description,
            teacher_id=payload.teacher_id,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Subject insert rejected by store", error=str(e.orig))
        raise _store_error(e, payload.name)
    logger.info("Subject created", subject_id=obj.id, teacher_id=obj.teacher_id)
    return _to_response(await subjects.find_with_teacher(obj.id))


async def list_subjects(db: AsyncSession) -> List[SubjectResponse]:
    rows = await SubjectRepository(db).find_all_with_teacher()
    return [_to_response(s) for s in rows]


async def get_subject_details(db: AsyncSession, subject_id: int) -> SubjectDetails:
    obj = await SubjectRepository(db).find_details(subject_id)
    if not obj:
        raise NotFoundError("Subject not found.")
    return _to_details(obj)


async def update_subject(
    db: AsyncSession,
    subject_id: int,
    payload: Union[SubjectUpdate, Any],
) -> Tuple[SubjectResponse, bool]:
    payload = validate_input(SubjectUpdate, payload)
    values = payload.model_dump(exclude_unset=True)
    if not values:
        raise InvalidInputError("No data was provided to update.")
    subjects = SubjectRepository(db)
    obj = await _get_or_404(subjects, subject_id)
    if "name" in values and values["name"] != obj.name:
        if await subjects.find_by_name(values["name"], exclude_id=subject_id):
            raise ConflictError(f"Another subject named '{values['name']}' already exists.")
    name = values.get("name", obj.name)
    new_teacher_id = values.get("teacher_id")
    if new_teacher_id is not None and new_teacher_id != obj.teacher_id:
        await _teacher_must_exist(db, new_teacher_id)
    try:
        changes = await subjects.update(obj, values)
        if changes:
            await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Subject update rejected by store", subject_id=subject_id, error=str(e.orig))
        raise _store_error(e, name)
    if changes:
        logger.info("Subject updated", subject_id=subject_id, fields=sorted(changes))
    return _to_response(await subjects.find_with_teacher(subject_id)), bool(changes)


async def assign_teacher(
    db: AsyncSession,
    subject_id: int,
    payload: Union[AssignTeacher, Any],
) -> SubjectResponse:
    payload = validate_input(AssignTeacher, payload)
    subjects = SubjectRepository(db)
    obj = await subjects.find_by_id(subject_id)
    if not obj:
        raise NotFoundError(f"Subject with ID {subject_id} not found.")
    name = obj.name
    teacher = await TeacherRepository(db).find_by_id(payload.teacher_id)
    if not teacher:
        raise NotFoundError(f"Teacher with ID {payload.teacher_id} not found.")
    try:
        await subjects.update(obj, {"teacher_id": teacher.id})
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Teacher assignment rejected by store", subject_id=subject_id, error=str(e.orig))
        raise _store_error(e, name)
    logger.info("Teacher assigned to subject", subject_id=subject_id, teacher_id=teacher.id)
    return _to_response(await subjects.find_with_teacher(subject_id))


async def delete_subject(db: AsyncSession, subject_id: int) -> None:
    """Enrollments in the subject are removed by the store's ON DELETE CASCADE."""
    subjects = SubjectRepository(db)
    await _get_or_404(subjects, subject_id)
    try:
        deleted = await subjects.delete_by_id(subject_id)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Subject delete rejected by store", subject_id=subject_id, error=str(e.orig))
        raise ConflictError("The subject cannot be deleted because it has associated records.")
    if not deleted:
        raise NotFoundError("Subject not found or already deleted.")
    logger.info("Subject deleted", subject_id=subject_id)
