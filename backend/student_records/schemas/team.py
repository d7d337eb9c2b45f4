"""
Schémas Pydantic pour les équipes et l'affectation des élèves.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from student_records.schemas.common import CamelModel
from student_records.schemas.student import StudentResponse


class TeamCreate(CamelModel):
    name: str = Field(max_length=50)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Team name cannot be empty.")
        return v.strip()


class TeamUpdate(TeamCreate):
    """Même contrat que la création : nom et description sont remplacés."""


class TeamResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str]
    created_at: datetime
    is_active: bool


class TeamAssign(CamelModel):
    """Corps de PUT /team-members/assign et /unassign."""
    team_id: uuid.UUID
    student_id: uuid.UUID


class TeamMemberResponse(StudentResponse):
    joined_at: datetime


class TeamMembersResponse(CamelModel):
    team: Optional[TeamResponse] = None
    members: List[TeamMemberResponse] = []
