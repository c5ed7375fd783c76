from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from academic_records.core.models._timestamps import UTCDateTime, utcnow
from academic_records.db.session import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    surname = Column(String(50), nullable=False)
    specialty = Column(String(100), nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    # passive_deletes="all": never null out subjects.teacher_id; the store restricts the delete.
    subjects = relationship("Subject", back_populates="teacher", passive_deletes="all")
