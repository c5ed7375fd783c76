from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TeacherCreate(BaseModel):
    """Used for both registration and full update (PUT)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50)
    surname: str = Field(..., min_length=2, max_length=50)
    specialty: Optional[str] = Field(None, max_length=100)

    @field_validator("specialty")
    @classmethod
    def blank_specialty_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


TeacherUpdate = TeacherCreate


class TeacherResponse(BaseModel):
    id: int
    name: str
    surname: str
    specialty: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeacherSummary(BaseModel):
    """Teacher fields shown next to a subject."""

    id: int
    name: str
    surname: str
    specialty: Optional[str] = None

    class Config:
        from_attributes = True
