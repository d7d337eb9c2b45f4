"""
Schémas Pydantic pour les présences et le pointage (clock-in / clock-out).
"""

import uuid
from datetime import datetime
from typing import Optional

from student_records.schemas.common import CamelModel
from student_records.schemas.course import CourseSummary
from student_records.schemas.student import StudentResponse


class ClockInRequest(CamelModel):
    """Corps de POST /attendance/clockin."""
    student_id: uuid.UUID
    course_id: uuid.UUID


class ClockOutRequest(CamelModel):
    """Corps de POST /attendance/clockout."""
    student_id: uuid.UUID
    course_id: uuid.UUID


class AttendanceCreate(CamelModel):
    """Saisie manuelle d'une présence (hors pointage)."""
    student_id: uuid.UUID
    course_id: uuid.UUID
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


class AttendanceUpdate(CamelModel):
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


class AttendanceResponse(CamelModel):
    id: uuid.UUID
    student_id: uuid.UUID
    course_id: uuid.UUID
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    created_at: datetime
    student: Optional[StudentResponse] = None
    course: Optional[CourseSummary] = None
