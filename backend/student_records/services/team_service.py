"""
Service métier pour les équipes et l'affectation des élèves.

Règles :
- Seules les équipes actives sont visibles ; la suppression est logique (is_active = False)
- Le nom d'une équipe active est unique (comparaison insensible à la casse)
- Un élève n'appartient qu'à une seule équipe active à la fois ; les affectations
  d'une équipe supprimée sont conservées mais ne bloquent plus l'élève
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from student_records.exceptions import BadRequestError, ConflictError, NotFoundError
from student_records.models.student import Student
from student_records.models.team import Team, TeamMember
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.team import (
    TeamAssign,
    TeamCreate,
    TeamMemberResponse,
    TeamMembersResponse,
    TeamResponse,
    TeamUpdate,
)

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "name": Team.name,
    "createdat": Team.created_at,
}

MEMBER_SORT_COLUMNS = {
    "firstname": Student.first_name,
    "lastname": Student.last_name,
    "email": Student.email,
    "createdat": TeamMember.created_at,  # date d'affectation (joinedAt)
}


def _get_active_team(db: Session, team_id: uuid.UUID) -> Optional[Team]:
    return db.execute(
        select(Team).where(Team.id == team_id, Team.is_active.is_(True))
    ).scalar()


def _name_in_use(db: Session, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    stmt = select(Team.id).where(
        Team.is_active.is_(True),
        func.lower(Team.name) == name.lower(),
    )
    if exclude_id is not None:
        stmt = stmt.where(Team.id != exclude_id)
    return db.execute(stmt.limit(1)).scalar() is not None


# ----------------------------------------------------------------
# Équipes
# ----------------------------------------------------------------

def get_teams(db: Session, pagination: PaginationRequest) -> tuple[list[TeamResponse], int]:
    stmt = apply_search(select(Team).where(Team.is_active.is_(True)), pagination.search, Team.name)
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[Team.created_at.desc()])
    teams, total = paginate(db, stmt, pagination)
    return [TeamResponse.model_validate(t) for t in teams], total


def get_team(db: Session, team_id: uuid.UUID) -> TeamResponse:
    team = _get_active_team(db, team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return TeamResponse.model_validate(team)


def create_team(db: Session, data: TeamCreate) -> TeamResponse:
    if _name_in_use(db, data.name):
        raise ConflictError(f"{data.name} is already in use")

    team = Team(name=data.name, description=data.description, is_active=True)
    db.add(team)
    db.commit()
    db.refresh(team)

    logger.info("Équipe créée : %s (%s)", team.name, team.id)
    return TeamResponse.model_validate(team)


def update_team(db: Session, team_id: uuid.UUID, data: TeamUpdate) -> TeamResponse:
    team = _get_active_team(db, team_id)
    if team is None:
        raise NotFoundError("Team not found")

    if _name_in_use(db, data.name, exclude_id=team_id):
        raise ConflictError(f"{data.name} is already in use")

    team.name = data.name
    team.description = data.description
    db.commit()
    db.refresh(team)
    return TeamResponse.model_validate(team)


def delete_team(db: Session, team_id: uuid.UUID) -> None:
    """Suppression logique : l'équipe disparaît des listes mais reste en base."""
    team = _get_active_team(db, team_id)
    if team is None:
        raise NotFoundError("Team not found")

    team.is_active = False
    db.commit()
    logger.info("Équipe désactivée : %s", team_id)


# ----------------------------------------------------------------
# Membres
# ----------------------------------------------------------------

def get_team_members(
    db: Session,
    team_id: uuid.UUID,
    pagination: PaginationRequest,
) -> tuple[TeamMembersResponse, int]:
    """Équipe et page de ses membres (élèves + date d'affectation)."""
    team = _get_active_team(db, team_id)
    if team is None:
        raise NotFoundError("Team not found")

    stmt = (
        select(Student, TeamMember.created_at)
        .join(TeamMember, TeamMember.student_id == Student.id)
        .where(TeamMember.team_id == team_id)
    )
    stmt = apply_search(
        stmt, pagination.search,
        Student.first_name, Student.last_name, Student.email, Student.phone_number,
    )
    stmt = apply_sorting(stmt, pagination, MEMBER_SORT_COLUMNS, default=[Student.first_name])
    rows, total = paginate(db, stmt, pagination, scalars=False)

    members = [
        TeamMemberResponse(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            email=student.email,
            phone_number=student.phone_number,
            gender=student.gender,
            created_at=student.created_at,
            joined_at=joined_at,
        )
        for student, joined_at in rows
    ]
    return TeamMembersResponse(team=TeamResponse.model_validate(team), members=members), total


def _check_assignment(db: Session, data: TeamAssign) -> None:
    if _get_active_team(db, data.team_id) is None:
        raise BadRequestError("Invalid teamId")
    if db.get(Student, data.student_id) is None:
        raise BadRequestError("Invalid student Id")


def assign_student(db: Session, data: TeamAssign) -> None:
    _check_assignment(db, data)

    # Les affectations aux équipes supprimées (inactives) ne comptent plus
    existing = db.execute(
        select(TeamMember.id)
        .join(Team, Team.id == TeamMember.team_id)
        .where(TeamMember.student_id == data.student_id, Team.is_active.is_(True))
        .limit(1)
    ).scalar()
    if existing is not None:
        raise BadRequestError("Student has previously been assigned to a team")

    db.add(TeamMember(team_id=data.team_id, student_id=data.student_id))
    db.commit()
    logger.info("Élève %s affecté à l'équipe %s", data.student_id, data.team_id)


def unassign_student(db: Session, data: TeamAssign) -> None:
    _check_assignment(db, data)

    member = db.execute(
        select(TeamMember).where(
            TeamMember.team_id == data.team_id,
            TeamMember.student_id == data.student_id,
        )
    ).scalar()
    if member is None:
        raise BadRequestError("Student team not found")

    db.delete(member)
    db.commit()
    logger.info("Élève %s retiré de l'équipe %s", data.student_id, data.team_id)
