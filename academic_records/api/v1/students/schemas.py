from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StudentCreate(BaseModel):
    """Used for both registration and full update (PUT)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50)
    surname: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    address: str = Field(..., min_length=5, max_length=255)


StudentUpdate = StudentCreate


class StudentResponse(BaseModel):
    id: int
    name: str
    surname: str
    email: str
    address: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StudentSummary(BaseModel):
    """Student fields exposed inside subject details; no enrollment columns."""

    id: int
    name: str
    surname: str
    email: str

    class Config:
        from_attributes = True
