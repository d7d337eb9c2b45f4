"""
Router pour les tâches notées.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from student_records.services import task_service

router = APIRouter(prefix="/api/v1/tasks", tags=["Tâches"])


@router.get("", response_model=ApiResponse[List[TaskResponse]], summary="Lister les tâches")
def list_tasks(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    tasks, total = task_service.get_tasks(db, pagination)
    return ApiResponse.ok(
        tasks,
        "Tasks retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("/{task_id}", response_model=ApiResponse[TaskResponse], summary="Détail d'une tâche")
def get_task(task_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(task_service.get_task(db, task_id), "Task retrieved successfully")


@router.post("", response_model=ApiResponse[TaskResponse], status_code=201, summary="Créer une tâche")
def create_task(data: TaskCreate, db: Session = Depends(get_db)):
    """Le cours doit exister (400 sinon)."""
    return ApiResponse.created(task_service.create_task(db, data), "Task created successfully")


@router.put("/{task_id}", response_model=ApiResponse[TaskResponse], summary="Modifier une tâche")
def update_task(task_id: uuid.UUID, data: TaskUpdate, db: Session = Depends(get_db)):
    return ApiResponse.ok(task_service.update_task(db, task_id, data), "Task updated successfully")


@router.delete("/{task_id}", response_model=ApiResponse[None], summary="Supprimer une tâche")
def delete_task(task_id: uuid.UUID, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)
    return ApiResponse.ok(message="Task deleted successfully")
