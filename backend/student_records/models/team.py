"""
Modèles SQLAlchemy pour les équipes et leurs membres.
Suppression logique des équipes : is_active passe à False.
"""

import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid, true

from student_records.database import Base, utcnow


class Team(Base):
    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)  # Unique parmi les équipes actives (insensible à la casse)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)


class TeamMember(Base):
    """Appartenance élève ↔ équipe. Un élève n'appartient qu'à une seule équipe."""
    __tablename__ = "team_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
