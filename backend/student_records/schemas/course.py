"""
Schémas Pydantic pour les cours et les inscriptions.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from student_records.schemas.common import CamelModel
from student_records.schemas.student import StudentResponse


class CourseCreate(CamelModel):
    course_code: str = Field(max_length=20)
    course_title: str = Field(max_length=200)

    @field_validator("course_code", "course_title")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty.")
        return v.strip()


class CourseUpdate(CamelModel):
    course_code: Optional[str] = Field(default=None, max_length=20)
    course_title: Optional[str] = Field(default=None, max_length=200)

    @field_validator("course_code", "course_title")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Field cannot be null.")
        if not v.strip():
            raise ValueError("Field cannot be empty.")
        return v.strip()


class CourseSummary(CamelModel):
    """Cours tel qu'imbriqué dans les autres réponses (présence, tâche, inscription)."""
    id: uuid.UUID
    course_code: str
    course_title: str
    created_at: datetime


class CourseResponse(CourseSummary):
    course_registration_count: int = 0


class CourseRegistrationCreate(CamelModel):
    student_id: uuid.UUID
    course_id: uuid.UUID


class CourseRegistrationResponse(CamelModel):
    id: uuid.UUID
    student_id: uuid.UUID
    course_id: uuid.UUID
    created_at: datetime
    student: Optional[StudentResponse] = None
    course: Optional[CourseSummary] = None
