"""
Service métier pour les inscriptions des élèves aux cours.
Les listes chargent élève et cours par jointure explicite (pas de chargement paresseux).
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.exceptions import ConflictError, NotFoundError
from student_records.models.course import Course, CourseRegistration
from student_records.models.student import Student
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.course import CourseRegistrationCreate, CourseRegistrationResponse, CourseSummary
from student_records.schemas.student import StudentResponse

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "student": Student.first_name,
    "course": Course.course_code,
    "createdat": CourseRegistration.created_at,
}

ALREADY_REGISTERED = "Student is already registered for this course"


def _base_query():
    return (
        select(CourseRegistration, Student, Course)
        .join(Student, Student.id == CourseRegistration.student_id)
        .join(Course, Course.id == CourseRegistration.course_id)
    )


def get_registrations(
    db: Session,
    pagination: PaginationRequest,
    student_id: Optional[uuid.UUID] = None,
    course_id: Optional[uuid.UUID] = None,
) -> tuple[list[CourseRegistrationResponse], int]:
    """
    Liste paginée des inscriptions, éventuellement filtrée par élève ou par cours.
    Recherche sur le nom de l'élève et le code / intitulé du cours ; plus récentes d'abord.
    """
    stmt = _base_query()
    if student_id is not None:
        stmt = stmt.where(CourseRegistration.student_id == student_id)
    if course_id is not None:
        stmt = stmt.where(CourseRegistration.course_id == course_id)

    stmt = apply_search(
        stmt, pagination.search,
        Student.first_name, Student.last_name, Course.course_code, Course.course_title,
    )
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[CourseRegistration.created_at.desc()])
    rows, total = paginate(db, stmt, pagination, scalars=False)
    return [_to_response(*row) for row in rows], total


def get_registration(db: Session, registration_id: uuid.UUID) -> CourseRegistrationResponse:
    row = db.execute(_base_query().where(CourseRegistration.id == registration_id)).first()
    if row is None:
        raise NotFoundError("Course registration not found")
    return _to_response(*row)


def create_registration(db: Session, data: CourseRegistrationCreate) -> CourseRegistrationResponse:
    """
    Inscrit un élève à un cours.

    Validations :
    1. L'élève existe
    2. Le cours existe
    3. L'élève n'est pas déjà inscrit à ce cours
    """
    student = db.get(Student, data.student_id)
    if student is None:
        raise NotFoundError("Student not found")

    course = db.get(Course, data.course_id)
    if course is None:
        raise NotFoundError("Course not found")

    existing = db.execute(
        select(CourseRegistration.id).where(
            CourseRegistration.student_id == data.student_id,
            CourseRegistration.course_id == data.course_id,
        )
    ).scalar()
    if existing is not None:
        raise ConflictError(ALREADY_REGISTERED)

    registration = CourseRegistration(student_id=data.student_id, course_id=data.course_id)
    db.add(registration)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(ALREADY_REGISTERED)
    db.refresh(registration)

    logger.info("Élève %s inscrit au cours %s", data.student_id, course.course_code)
    return _to_response(registration, student, course)


def delete_registration(db: Session, registration_id: uuid.UUID) -> None:
    registration = db.get(CourseRegistration, registration_id)
    if registration is None:
        raise NotFoundError("Course registration not found")

    db.delete(registration)
    db.commit()


def is_registered(db: Session, student_id: uuid.UUID, course_id: uuid.UUID) -> bool:
    """Indique si l'élève est inscrit au cours (utilisé par la notation)."""
    return db.execute(
        select(CourseRegistration.id).where(
            CourseRegistration.student_id == student_id,
            CourseRegistration.course_id == course_id,
        ).limit(1)
    ).scalar() is not None


def _to_response(registration: CourseRegistration, student: Student, course: Course) -> CourseRegistrationResponse:
    return CourseRegistrationResponse(
        id=registration.id,
        student_id=registration.student_id,
        course_id=registration.course_id,
        created_at=registration.created_at,
        student=StudentResponse.model_validate(student),
        course=CourseSummary.model_validate(course),
    )
