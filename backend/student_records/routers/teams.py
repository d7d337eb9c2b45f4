"""
Routers pour les équipes et l'affectation des élèves aux équipes.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.team import TeamAssign, TeamCreate, TeamMembersResponse, TeamResponse, TeamUpdate
from student_records.services import team_service

router = APIRouter(prefix="/api/v1/team", tags=["Équipes"])
members_router = APIRouter(prefix="/api/v1/team-members", tags=["Équipes"])


@router.get("", response_model=ApiResponse[List[TeamResponse]], summary="Lister les équipes actives")
def list_teams(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    teams, total = team_service.get_teams(db, pagination)
    return ApiResponse.ok(
        teams,
        "Teams retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("/{team_id}", response_model=ApiResponse[TeamResponse], summary="Détail d'une équipe")
def get_team(team_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(team_service.get_team(db, team_id), "Team retrieved successfully")


@router.post("", response_model=ApiResponse[TeamResponse], status_code=201, summary="Créer une équipe")
def create_team(data: TeamCreate, db: Session = Depends(get_db)):
    """Nom déjà utilisé par une équipe active → 409."""
    return ApiResponse.created(team_service.create_team(db, data), "Team created successfully")


@router.put("/{team_id}", response_model=ApiResponse[TeamResponse], summary="Modifier une équipe")
def update_team(team_id: uuid.UUID, data: TeamUpdate, db: Session = Depends(get_db)):
    return ApiResponse.ok(team_service.update_team(db, team_id, data), "Team updated successfully")


@router.delete("/{team_id}", response_model=ApiResponse[None], summary="Supprimer une équipe")
def delete_team(team_id: uuid.UUID, db: Session = Depends(get_db)):
    """Suppression logique (is_active → False)."""
    team_service.delete_team(db, team_id)
    return ApiResponse.ok(message="Team deleted successfully")


@members_router.get("/{team_id}", response_model=ApiResponse[TeamMembersResponse], summary="Membres d'une équipe")
def list_team_members(
    team_id: uuid.UUID,
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    members, total = team_service.get_team_members(db, team_id, pagination)
    return ApiResponse.ok(
        members,
        "Team members retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@members_router.put("/assign", response_model=ApiResponse[None], summary="Affecter un élève à une équipe")
def assign_student(data: TeamAssign, db: Session = Depends(get_db)):
    """Un élève ne peut appartenir qu'à une seule équipe (400 sinon)."""
    team_service.assign_student(db, data)
    return ApiResponse.ok(message="Student assigned to team successfully")


@members_router.put("/unassign", response_model=ApiResponse[None], summary="Retirer un élève d'une équipe")
def unassign_student(data: TeamAssign, db: Session = Depends(get_db)):
    team_service.unassign_student(db, data)
    return ApiResponse.ok(message="Student team has been unassigned successfully")
