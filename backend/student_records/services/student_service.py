"""
Service métier pour les élèves.
Gère la création, la lecture, la modification et la suppression des élèves.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.exceptions import ConflictError, NotFoundError
from student_records.models.student import Student
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.student import StudentCreate, StudentResponse, StudentUpdate

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "firstname": Student.first_name,
    "lastname": Student.last_name,
    "email": Student.email,
    "createdat": Student.created_at,
}

DUPLICATE_EMAIL = "Student with this email already exists"


def get_students(db: Session, pagination: PaginationRequest) -> tuple[list[StudentResponse], int]:
    """Liste paginée, recherche sur prénom / nom / email, tri par prénom par défaut."""
    stmt = apply_search(select(Student), pagination.search, Student.first_name, Student.last_name, Student.email)
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[Student.first_name])
    students, total = paginate(db, stmt, pagination)
    return [StudentResponse.model_validate(s) for s in students], total


def get_student(db: Session, student_id: uuid.UUID) -> StudentResponse:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    return StudentResponse.model_validate(student)


def create_student(db: Session, data: StudentCreate) -> StudentResponse:
    """
    Crée un élève.
    Lève ConflictError si l'email est déjà utilisé (vérification + contrainte UNIQUE).
    """
    if _email_taken(db, data.email):
        raise ConflictError(DUPLICATE_EMAIL)

    student = Student(**data.model_dump())
    db.add(student)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL)
    db.refresh(student)

    logger.info("Élève créé : %s (%s)", student.email, student.id)
    return StudentResponse.model_validate(student)


def update_student(db: Session, student_id: uuid.UUID, data: StudentUpdate) -> StudentResponse:
    """Met à jour les champs fournis. L'id et created_at ne sont jamais modifiés."""
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")

    update_data = data.model_dump(exclude_unset=True)
    if "email" in update_data and _email_taken(db, update_data["email"], exclude_id=student_id):
        raise ConflictError(DUPLICATE_EMAIL)

    for field, value in update_data.items():
        setattr(student, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL)
    db.refresh(student)
    return StudentResponse.model_validate(student)


def delete_student(db: Session, student_id: uuid.UUID) -> None:
    """Supprime définitivement un élève (inscriptions, présences et notes en cascade)."""
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")

    db.delete(student)
    db.commit()
    logger.info("Élève supprimé : %s", student_id)


def _email_taken(db: Session, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    stmt = select(Student.id).where(Student.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Student.id != exclude_id)
    return db.execute(stmt.limit(1)).scalar() is not None
