from academic_records.core.models.student import Student
from academic_records.core.models.teacher import Teacher
from academic_records.core.models.subject import Subject
from academic_records.core.models.enrollment import Enrollment

__all__ = [
    "Enrollment",
    "Student",
    "Subject",
    "Teacher",
]
