"""Enrollment of students in subjects.

The pre-check on the (student, subject) pair and the insert are not atomic;
the store's unique constraint decides concurrent duplicates, and that outcome
is reported exactly like the pre-check: 409 with the existing enrollment.
"""

from typing import Any, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.core.exceptions import ConflictError, NotFoundError
from academic_records.core.logging import get_logger
from academic_records.core.models import Enrollment
from academic_records.core.models._timestamps import utcnow
from academic_records.core.validation import validate_input
from academic_records.db.errors import is_foreign_key_violation
from academic_records.db.repositories import EnrollmentRepository, StudentRepository, SubjectRepository

from .schemas import EnrollmentCreate, EnrollmentResponse

logger = get_logger(__name__)


def _to_response(e: Enrollment) -> EnrollmentResponse:
    return EnrollmentResponse(
        id=e.id,
        student_id=e.student_id,
        subject_id=e.subject_id,
        enrolled_at=e.enrolled_at,
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


async def enroll_student(
    db: AsyncSession,
    payload: Union[EnrollmentCreate, Any],
) -> EnrollmentResponse:
    payload = validate_input(EnrollmentCreate, payload)
    student_id, subject_id = payload.student_id, payload.subject_id

    student = await StudentRepository(db).find_by_id(student_id)
    if not student:
        raise NotFoundError(f"Student with ID {student_id} not found.")
    subject = await SubjectRepository(db).find_by_id(subject_id)
    if not subject:
        raise NotFoundError(f"Subject with ID {subject_id} not found.")
    already_enrolled = (
        f"Student {student.name} {student.surname} is already enrolled in subject {subject.name}."
    )

    enrollments = EnrollmentRepository(db)
    existing = await enrollments.find_pair(student_id, subject_id)
    if existing:
        raise ConflictError(already_enrolled, result=_to_response(existing))

    try:
        obj = await enrollments.create(
            student_id=student_id,
            subject_id=subject_id,
            enrolled_at=utcnow(),
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(
            "Enrollment insert rejected by store",
            student_id=student_id,
            subject_id=subject_id,
            error=str(e.orig),
        )
        if is_foreign_key_violation(e):
            raise NotFoundError("The student or the subject no longer exists.")
        existing = await enrollments.find_pair(student_id, subject_id)
        raise ConflictError(already_enrolled, result=_to_response(existing) if existing else None)

    logger.info("Student enrolled", enrollment_id=obj.id, student_id=student_id, subject_id=subject_id)
    return _to_response(obj)
