"""
Router pour les notes des élèves.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.task import TaskScoreCreate, TaskScoreResponse, TaskScoreUpdate
from student_records.services import task_score_service

router = APIRouter(prefix="/api/v1/taskscores", tags=["Notes"])


@router.get("", response_model=ApiResponse[List[TaskScoreResponse]], summary="Lister les notes")
def list_task_scores(
    task_id: Optional[uuid.UUID] = Query(None, alias="taskId"),
    student_id: Optional[uuid.UUID] = Query(None, alias="studentId"),
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Filtrable par tâche (taskId) et/ou par élève (studentId)."""
    scores, total = task_score_service.get_task_scores(db, pagination, task_id=task_id, student_id=student_id)
    return ApiResponse.ok(
        scores,
        "Task scores retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("/{task_score_id}", response_model=ApiResponse[TaskScoreResponse], summary="Détail d'une note")
def get_task_score(task_score_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(task_score_service.get_task_score(db, task_score_id), "Task score retrieved successfully")


@router.post("", response_model=ApiResponse[TaskScoreResponse], status_code=201, summary="Noter un élève")
def create_task_score(data: TaskScoreCreate, db: Session = Depends(get_db)):
    """
    Erreurs :
    - 400 : tâche ou élève introuvable, élève non inscrit au cours, note supérieure au maximum
    - 409 : l'élève a déjà une note pour cette tâche
    """
    return ApiResponse.created(task_score_service.create_task_score(db, data), "Task score created successfully")


@router.put("/{task_score_id}", response_model=ApiResponse[TaskScoreResponse], summary="Modifier une note")
def update_task_score(task_score_id: uuid.UUID, data: TaskScoreUpdate, db: Session = Depends(get_db)):
    return ApiResponse.ok(
        task_score_service.update_task_score(db, task_score_id, data),
        "Task score updated successfully",
    )


@router.delete("/{task_score_id}", response_model=ApiResponse[None], summary="Supprimer une note")
def delete_task_score(task_score_id: uuid.UUID, db: Session = Depends(get_db)):
    task_score_service.delete_task_score(db, task_score_id)
    return ApiResponse.ok(message="Task score deleted successfully")
