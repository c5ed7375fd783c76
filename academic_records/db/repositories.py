"""Typed CRUD accessors over an injected AsyncSession.

Repositories only flush; committing and rolling back belong to the services,
which own the unit of work for a request.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academic_records.core.models import Enrollment, Student, Subject, Teacher

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    model: Type[ModelT]
    default_order: Sequence[Any] = ()

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_id(self, entity_id: int) -> Optional[ModelT]:
        result = await self.db.execute(select(self.model).where(self.model.id == entity_id))
        return result.scalar_one_or_none()

    async def find_one(self, *criteria: Any) -> Optional[ModelT]:
        result = await self.db.execute(select(self.model).where(*criteria).limit(1))
        return result.scalars().first()

    async def find_all(self) -> List[ModelT]:
        stmt = select(self.model).order_by(*self.default_order)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def exists(self, *criteria: Any) -> bool:
        result = await self.db.execute(select(exists().where(*criteria)))
        return bool(result.scalar())

    async def create(self, **values: Any) -> ModelT:
        obj = self.model(**values)
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelT, values: Dict[str, Any]) -> Dict[str, Any]:
        """Apply values that differ from the current ones; return only those."""
        changes = {key: value for key, value in values.items() if getattr(obj, key) != value}
        for key, value in changes.items():
            setattr(obj, key, value)
        if changes:
            await self.db.flush()
        return changes

    async def delete_by_id(self, entity_id: int) -> int:
        result = await self.db.execute(
            delete(self.model)
            .where(self.model.id == entity_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class StudentRepository(Repository[Student]):
    model = Student
    default_order = (Student.surname, Student.name)

    async def find_by_email(self, email: str, exclude_id: Optional[int] = None) -> Optional[Student]:
        criteria = [Student.email == email]
        if exclude_id is not None:
            criteria.append(Student.id != exclude_id)
        return await self.find_one(*criteria)

    async def find_enrolled_subjects(self, student_id: int) -> List[Subject]:
        result = await self.db.execute(
            select(Subject)
            .join(Enrollment, Enrollment.subject_id == Subject.id)
            .where(Enrollment.student_id == student_id)
            .order_by(Subject.name)
        )
        return list(result.scalars().all())


class TeacherRepository(Repository[Teacher]):
    model = Teacher
    default_order = (Teacher.surname, Teacher.name)

    async def find_taught_subjects(self, teacher_id: int) -> List[Subject]:
        result = await self.db.execute(
            select(Subject).where(Subject.teacher_id == teacher_id).order_by(Subject.name)
        )
        return list(result.scalars().all())

    async def has_subjects(self, teacher_id: int) -> bool:
        return await self.exists(Subject.teacher_id == teacher_id)


class SubjectRepository(Repository[Subject]):
    model = Subject
    default_order = (Subject.name,)

    async def find_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[Subject]:
        criteria = [Subject.name == name]
        if exclude_id is not None:
            criteria.append(Subject.id != exclude_id)
        return await self.find_one(*criteria)

    async def find_with_teacher(self, subject_id: int) -> Optional[Subject]:
        # populate_existing: teacher_id may have changed on an object already in the identity map
        result = await self.db.execute(
            select(Subject)
            .options(selectinload(Subject.teacher))
            .where(Subject.id == subject_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_all_with_teacher(self) -> List[Subject]:
        result = await self.db.execute(
            select(Subject)
            .options(selectinload(Subject.teacher))
            .order_by(*self.default_order)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def find_details(self, subject_id: int) -> Optional[Subject]:
        result = await self.db.execute(
            select(Subject)
            .options(selectinload(Subject.teacher), selectinload(Subject.students))
            .where(Subject.id == subject_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


class EnrollmentRepository(Repository[Enrollment]):
    model = Enrollment

    async def find_pair(self, student_id: int, subject_id: int) -> Optional[Enrollment]:
        return await self.find_one(
            Enrollment.student_id == student_id,
            Enrollment.subject_id == subject_id,
        )
