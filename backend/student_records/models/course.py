"""
Modèles SQLAlchemy pour les cours et les inscriptions des élèves.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid

from student_records.database import Base, utcnow


class Course(Base):
    __tablename__ = "courses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    course_code = Column(String(20), unique=True, nullable=False)  # Ex: "MTH101"
    course_title = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class CourseRegistration(Base):
    """Inscription élève ↔ cours (une seule par couple)."""
    __tablename__ = "course_registrations"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_course_registrations_student_course"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
