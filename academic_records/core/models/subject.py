"""Subjects. teacher_id is optional; a referenced teacher cannot be deleted (RESTRICT)."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from academic_records.core.models._timestamps import UTCDateTime, utcnow
from academic_records.db.session import Base


class Subject(Base):
    __tablename__ = "subjects"
    __table_args__ = (UniqueConstraint("name", name="uq_subject_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    teacher_id = Column(
        Integer,
        ForeignKey("teachers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    teacher = relationship("Teacher", back_populates="subjects", foreign_keys=[teacher_id])
    enrollments = relationship(
        "Enrollment",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    students = relationship("Student", secondary="enrollments", viewonly=True, order_by="Student.id")
