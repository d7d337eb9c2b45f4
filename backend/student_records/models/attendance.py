"""
Modèle SQLAlchemy pour les présences (pointage entrée / sortie).

Un enregistrement est "actif" tant que clock_in est renseigné et clock_out est NULL.
Un élève ne peut avoir qu'un seul enregistrement actif, tous cours confondus :
l'index unique partiel uq_attendances_active_student le garantit côté base,
même si deux pointages simultanés passent la vérification du service.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, Uuid, and_

from student_records.database import Base, utcnow


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    clock_in = Column(DateTime(timezone=True), nullable=True)
    clock_out = Column(DateTime(timezone=True), nullable=True)  # NULL = élève encore présent

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


_active_clause = and_(Attendance.clock_in.is_not(None), Attendance.clock_out.is_(None))

Index(
    "uq_attendances_active_student",
    Attendance.student_id,
    unique=True,
    postgresql_where=_active_clause,
    sqlite_where=_active_clause,
)
