"""
Schémas Pydantic pour les tâches notées et les notes des élèves.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from student_records.schemas.common import CamelModel
from student_records.schemas.course import CourseSummary
from student_records.schemas.student import StudentResponse


class TaskCreate(CamelModel):
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    course_id: uuid.UUID
    max_obtainable_score: float = Field(gt=0)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Task title cannot be empty.")
        return v.strip()


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    max_obtainable_score: Optional[float] = Field(default=None, gt=0)

    @field_validator("title", "max_obtainable_score")
    @classmethod
    def not_null(cls, v):
        # Colonnes NOT NULL : absent = inchangé, null explicite = refusé
        if v is None:
            raise ValueError("Field cannot be null.")
        return v

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Task title cannot be empty.")
        return v.strip()


class TaskSummary(CamelModel):
    id: uuid.UUID
    title: str
    course_id: uuid.UUID
    max_obtainable_score: float


class TaskResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str]
    course_id: uuid.UUID
    course: Optional[CourseSummary] = None
    max_obtainable_score: float
    created_at: datetime
    task_scores_count: int = 0


class TaskScoreCreate(CamelModel):
    task_id: uuid.UUID
    student_id: uuid.UUID
    score: float = Field(ge=0)


class TaskScoreUpdate(CamelModel):
    score: float = Field(ge=0)


class TaskScoreResponse(CamelModel):
    id: uuid.UUID
    task_id: uuid.UUID
    task: Optional[TaskSummary] = None
    student_id: uuid.UUID
    student: Optional[StudentResponse] = None
    score: float
    created_at: datetime
