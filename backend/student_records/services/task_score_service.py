"""
Service métier pour les notes des élèves sur les tâches.

Une note n'est acceptée que si :
1. La tâche existe
2. L'élève existe
3. L'élève est inscrit au cours de la tâche
4. La note ne dépasse pas la note maximale de la tâche
5. L'élève n'a pas déjà une note pour cette tâche
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.exceptions import BadRequestError, ConflictError, NotFoundError
from student_records.models.student import Student
from student_records.models.task import Task, TaskScore
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.student import StudentResponse
from student_records.schemas.task import TaskScoreCreate, TaskScoreResponse, TaskScoreUpdate, TaskSummary
from student_records.services.course_registration_service import is_registered

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "score": TaskScore.score,
    "tasktitle": Task.title,
    "studentname": (Student.last_name, Student.first_name),
    "createdat": TaskScore.created_at,
}

DUPLICATE_SCORE = "A score already exists for this student and task. Use PUT to update the existing score."


def _base_query():
    return (
        select(TaskScore, Task, Student)
        .join(Task, Task.id == TaskScore.task_id)
        .join(Student, Student.id == TaskScore.student_id)
    )


def get_task_scores(
    db: Session,
    pagination: PaginationRequest,
    task_id: Optional[uuid.UUID] = None,
    student_id: Optional[uuid.UUID] = None,
) -> tuple[list[TaskScoreResponse], int]:
    """Liste paginée, filtrable par tâche et/ou élève ; plus récentes d'abord par défaut."""
    stmt = _base_query()
    if task_id is not None:
        stmt = stmt.where(TaskScore.task_id == task_id)
    if student_id is not None:
        stmt = stmt.where(TaskScore.student_id == student_id)

    stmt = apply_search(
        stmt, pagination.search,
        Task.title, Student.first_name, Student.last_name, Student.email,
    )
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[TaskScore.created_at.desc()])
    rows, total = paginate(db, stmt, pagination, scalars=False)
    return [_to_response(*row) for row in rows], total


def get_task_score(db: Session, task_score_id: uuid.UUID) -> TaskScoreResponse:
    row = db.execute(_base_query().where(TaskScore.id == task_score_id)).first()
    if row is None:
        raise NotFoundError("Task score not found")
    return _to_response(*row)


def create_task_score(db: Session, data: TaskScoreCreate) -> TaskScoreResponse:
    task = db.get(Task, data.task_id)
    if task is None:
        raise BadRequestError("The specified task does not exist")

    student = db.get(Student, data.student_id)
    if student is None:
        raise BadRequestError("The specified student does not exist")

    if not is_registered(db, data.student_id, task.course_id):
        raise BadRequestError("The student is not enrolled in the course tied to this task")

    if data.score > task.max_obtainable_score:
        raise BadRequestError(
            f"The score cannot exceed the maximum obtainable score of {task.max_obtainable_score:g}"
        )

    existing = db.execute(
        select(TaskScore.id).where(
            TaskScore.task_id == data.task_id,
            TaskScore.student_id == data.student_id,
        )
    ).scalar()
    if existing is not None:
        raise ConflictError(DUPLICATE_SCORE)

    task_score = TaskScore(task_id=data.task_id, student_id=data.student_id, score=data.score)
    db.add(task_score)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_SCORE)
    db.refresh(task_score)

    logger.info("Note %s enregistrée : élève %s, tâche %s", data.score, data.student_id, data.task_id)
    return _to_response(task_score, task, student)


def update_task_score(db: Session, task_score_id: uuid.UUID, data: TaskScoreUpdate) -> TaskScoreResponse:
    """Seule la note est modifiable ; elle reste bornée par la note maximale de la tâche."""
    row = db.execute(_base_query().where(TaskScore.id == task_score_id)).first()
    if row is None:
        raise NotFoundError("Task score not found")

    task_score, task, student = row
    if data.score > task.max_obtainable_score:
        raise BadRequestError(
            f"The score cannot exceed the maximum obtainable score of {task.max_obtainable_score:g}"
        )

    task_score.score = data.score
    db.commit()
    db.refresh(task_score)
    return _to_response(task_score, task, student)


def delete_task_score(db: Session, task_score_id: uuid.UUID) -> None:
    task_score = db.get(TaskScore, task_score_id)
    if task_score is None:
        raise NotFoundError("Task score not found")

    db.delete(task_score)
    db.commit()


def _to_response(task_score: TaskScore, task: Task, student: Student) -> TaskScoreResponse:
    return TaskScoreResponse(
        id=task_score.id,
        task_id=task_score.task_id,
        task=TaskSummary.model_validate(task),
        student_id=task_score.student_id,
        student=StudentResponse.model_validate(student),
        score=task_score.score,
        created_at=task_score.created_at,
    )
