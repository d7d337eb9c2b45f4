"""
Modèles SQLAlchemy pour les tâches notées et les notes des élèves.
"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, String, UniqueConstraint, Uuid

from student_records.database import Base, utcnow


class Task(Base):
    """Travail noté rattaché à un cours (dont la tâche de présence journalière). Titre unique par cours."""
    __tablename__ = "tasks"
    __table_args__ = (
        UniqueConstraint("course_id", "title", name="uq_tasks_course_title"),
        CheckConstraint("max_obtainable_score > 0", name="ck_tasks_max_score_positive"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    course_id = Column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    max_obtainable_score = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class TaskScore(Base):
    """Note d'un élève pour une tâche (une seule par couple tâche/élève)."""
    __tablename__ = "task_scores"
    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_task_scores_task_student"),
        CheckConstraint("score >= 0", name="ck_task_scores_score_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
