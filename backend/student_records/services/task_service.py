"""
Service métier pour les tâches notées.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.exceptions import BadRequestError, ConflictError, NotFoundError
from student_records.models.course import Course
from student_records.models.task import Task, TaskScore
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.course import CourseSummary
from student_records.schemas.task import TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "title": Task.title,
    "coursetitle": Course.course_title,
    "maxscore": Task.max_obtainable_score,
    "createdat": Task.created_at,
}

DUPLICATE_TITLE = "A task with this title already exists for this course"


def _base_query():
    scores = (
        select(func.count(TaskScore.id))
        .where(TaskScore.task_id == Task.id)
        .correlate(Task)
        .scalar_subquery()
    )
    return (
        select(Task, Course, scores.label("task_scores_count"))
        .join(Course, Course.id == Task.course_id)
    )


def get_tasks(db: Session, pagination: PaginationRequest) -> tuple[list[TaskResponse], int]:
    """Liste paginée ; recherche sur titre, description et intitulé du cours ; plus récentes d'abord."""
    stmt = apply_search(_base_query(), pagination.search, Task.title, Task.description, Course.course_title)
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[Task.created_at.desc()])
    rows, total = paginate(db, stmt, pagination, scalars=False)
    return [_to_response(*row) for row in rows], total


def get_task(db: Session, task_id: uuid.UUID) -> TaskResponse:
    row = db.execute(_base_query().where(Task.id == task_id)).first()
    if row is None:
        raise NotFoundError("Task not found")
    return _to_response(*row)


def create_task(db: Session, data: TaskCreate) -> TaskResponse:
    """Crée une tâche. Le cours doit exister (BadRequestError sinon) et le titre y être libre."""
    if db.get(Course, data.course_id) is None:
        raise BadRequestError("The specified course does not exist")

    if _title_taken(db, data.course_id, data.title):
        raise ConflictError(DUPLICATE_TITLE)

    task = Task(
        title=data.title,
        description=data.description,
        course_id=data.course_id,
        max_obtainable_score=data.max_obtainable_score,
    )
    db.add(task)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_TITLE)
    db.refresh(task)

    logger.info("Tâche créée : %s (%s)", task.title, task.id)
    return get_task(db, task.id)


def update_task(db: Session, task_id: uuid.UUID, data: TaskUpdate) -> TaskResponse:
    """
    Met à jour titre, description et note maximale ; le cours ne change pas.
    La note maximale ne peut pas descendre sous la meilleure note déjà attribuée.
    """
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")

    update_data = data.model_dump(exclude_unset=True)
    if "title" in update_data and _title_taken(db, task.course_id, update_data["title"], exclude_id=task_id):
        raise ConflictError(DUPLICATE_TITLE)

    if "max_obtainable_score" in update_data:
        best_score = db.execute(
            select(func.max(TaskScore.score)).where(TaskScore.task_id == task_id)
        ).scalar()
        if best_score is not None and best_score > update_data["max_obtainable_score"]:
            raise BadRequestError(
                f"The maximum obtainable score cannot be lower than an existing score of {best_score:g}"
            )

    for field, value in update_data.items():
        setattr(task, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_TITLE)
    return get_task(db, task_id)


def delete_task(db: Session, task_id: uuid.UUID) -> None:
    """Supprime une tâche et ses notes (cascade)."""
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")

    db.delete(task)
    db.commit()


def _to_response(task: Task, course: Course, task_scores_count: int) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        course_id=task.course_id,
        course=CourseSummary.model_validate(course),
        max_obtainable_score=task.max_obtainable_score,
        created_at=task.created_at,
        task_scores_count=task_scores_count or 0,
    )


def _title_taken(db: Session, course_id: uuid.UUID, title: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    stmt = select(Task.id).where(Task.course_id == course_id, Task.title == title)
    if exclude_id is not None:
        stmt = stmt.where(Task.id != exclude_id)
    return db.execute(stmt.limit(1)).scalar() is not None
