from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from academic_records.api.v1.students.schemas import StudentSummary
from academic_records.api.v1.teachers.schemas import TeacherSummary
from academic_records.core.validation import ReferenceId

_TEACHER_ID = AliasChoices("teacher_id", "teacherId")


class SubjectCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    teacher_id: Optional[ReferenceId] = Field(None, validation_alias=_TEACHER_ID)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class SubjectUpdate(BaseModel):
    """Partial update: omitted fields are left unchanged, null clears description/teacher."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    teacher_id: Optional[ReferenceId] = Field(None, validation_alias=_TEACHER_ID)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("must not be null")
        return v


class AssignTeacher(BaseModel):
    teacher_id: ReferenceId = Field(..., validation_alias=_TEACHER_ID)


class SubjectSummary(BaseModel):
    """Subject fields listed for a student or a teacher; no enrollment columns."""

    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class SubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    description: Optional[str] = None
    teacher_id: Optional[int] = None
    assigned_teacher: Optional[TeacherSummary] = Field(None, alias="profesorAsignado")
    created_at: datetime
    updated_at: datetime


class SubjectDetails(SubjectResponse):
    enrolled_students: List[StudentSummary] = Field(default_factory=list, alias="estudiantesInscritos")
