from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from academic_records.core.validation import ReferenceId


class EnrollmentCreate(BaseModel):
    student_id: ReferenceId = Field(..., validation_alias=AliasChoices("student_id", "studentId"))
    subject_id: ReferenceId = Field(..., validation_alias=AliasChoices("subject_id", "subjectId"))


class EnrollmentResponse(BaseModel):
    id: int
    student_id: int
    subject_id: int
    enrolled_at: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
