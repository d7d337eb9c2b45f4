"""
Service métier pour les cours.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.exceptions import ConflictError, NotFoundError
from student_records.models.course import Course, CourseRegistration
from student_records.models.student import Student
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from student_records.schemas.student import StudentResponse

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "coursecode": Course.course_code,
    "coursetitle": Course.course_title,
    "createdat": Course.created_at,
}

DUPLICATE_CODE = "Course with this code already exists"


def get_courses(db: Session, pagination: PaginationRequest) -> tuple[list[CourseResponse], int]:
    """Liste paginée avec le nombre d'inscrits, triée par code de cours par défaut."""
    registrations = (
        select(func.count(CourseRegistration.id))
        .where(CourseRegistration.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
    )
    stmt = select(Course, registrations.label("registration_count"))
    stmt = apply_search(stmt, pagination.search, Course.course_code, Course.course_title)
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[Course.course_code])
    rows, total = paginate(db, stmt, pagination, scalars=False)
    return [_to_response(course, count) for course, count in rows], total


def get_course(db: Session, course_id: uuid.UUID) -> CourseResponse:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return _to_response(course, _registration_count(db, course_id))


def get_course_students(db: Session, course_id: uuid.UUID) -> list[StudentResponse]:
    """Élèves inscrits à un cours, triés par nom puis prénom."""
    if db.get(Course, course_id) is None:
        raise NotFoundError("Course not found")

    students = db.execute(
        select(Student)
        .join(CourseRegistration, CourseRegistration.student_id == Student.id)
        .where(CourseRegistration.course_id == course_id)
        .order_by(Student.last_name, Student.first_name)
    ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


def create_course(db: Session, data: CourseCreate) -> CourseResponse:
    """Crée un cours. Lève ConflictError si le code existe déjà."""
    if _code_taken(db, data.course_code):
        raise ConflictError(DUPLICATE_CODE)

    course = Course(course_code=data.course_code, course_title=data.course_title)
    db.add(course)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_CODE)
    db.refresh(course)

    logger.info("Cours créé : %s (%s)", course.course_code, course.id)
    return _to_response(course, 0)


def update_course(db: Session, course_id: uuid.UUID, data: CourseUpdate) -> CourseResponse:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")

    update_data = data.model_dump(exclude_unset=True)
    if "course_code" in update_data and _code_taken(db, update_data["course_code"], exclude_id=course_id):
        raise ConflictError(DUPLICATE_CODE)

    for field, value in update_data.items():
        setattr(course, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_CODE)
    db.refresh(course)
    return _to_response(course, _registration_count(db, course_id))


def delete_course(db: Session, course_id: uuid.UUID) -> None:
    """Supprime un cours ; inscriptions, présences et tâches suivent en cascade."""
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")

    db.delete(course)
    db.commit()
    logger.info("Cours supprimé : %s", course_id)


def _code_taken(db: Session, code: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    stmt = select(Course.id).where(Course.course_code == code)
    if exclude_id is not None:
        stmt = stmt.where(Course.id != exclude_id)
    return db.execute(stmt.limit(1)).scalar() is not None


def _registration_count(db: Session, course_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count())
        .select_from(CourseRegistration)
        .where(CourseRegistration.course_id == course_id)
    ).scalar() or 0


def _to_response(course: Course, registration_count: int) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        course_code=course.course_code,
        course_title=course.course_title,
        created_at=course.created_at,
        course_registration_count=registration_count or 0,
    )
