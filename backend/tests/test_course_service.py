"""
Tests unitaires pour les services des cours et des inscriptions.
"""

import uuid

import pytest
from pydantic import ValidationError

from factories import add_course, add_student, register
from student_records.exceptions import ConflictError, NotFoundError
from student_records.pagination import PaginationRequest
from student_records.schemas.course import CourseCreate, CourseRegistrationCreate, CourseUpdate
from student_records.services.course_registration_service import (
    create_registration,
    delete_registration,
    get_registration,
    get_registrations,
    is_registered,
)
from student_records.services.course_service import (
    create_course,
    delete_course,
    get_course,
    get_course_students,
    get_courses,
    update_course,
)


# --- Cours ---

def test_create_course_succes(db_session):
    result = create_course(db_session, CourseCreate(course_code="MTH101", course_title="Algebra"))
    assert result.course_code == "MTH101"
    assert result.course_registration_count == 0


def test_create_course_code_duplique(db_session):
    add_course(db_session, "MTH101")
    with pytest.raises(ConflictError, match="Course with this code already exists"):
        create_course(db_session, CourseCreate(course_code="MTH101", course_title="Autre"))


def test_get_courses_avec_nombre_inscrits(db_session):
    algebra = add_course(db_session, "MTH101", "Algebra")
    add_course(db_session, "PHY101", "Physics")
    register(db_session, add_student(db_session, "Alice", "Martin"), algebra)
    register(db_session, add_student(db_session, "Bob", "Durand"), algebra)

    items, total = get_courses(db_session, PaginationRequest())
    assert total == 2
    assert [(c.course_code, c.course_registration_count) for c in items] == [("MTH101", 2), ("PHY101", 0)]


def test_get_course_introuvable(db_session):
    with pytest.raises(NotFoundError, match="Course not found"):
        get_course(db_session, uuid.uuid4())


def test_update_course(db_session):
    course = add_course(db_session, "MTH101", "Algebra")
    result = update_course(db_session, course.id, CourseUpdate(course_title="Linear Algebra"))
    assert result.course_code == "MTH101"
    assert result.course_title == "Linear Algebra"


def test_course_update_null_explicite_rejete():
    with pytest.raises(ValidationError):
        CourseUpdate.model_validate({"courseCode": None})


def test_update_course_code_deja_pris(db_session):
    add_course(db_session, "MTH101")
    physics = add_course(db_session, "PHY101", "Physics")
    with pytest.raises(ConflictError):
        update_course(db_session, physics.id, CourseUpdate(course_code="MTH101"))


def test_get_course_students(db_session):
    course = add_course(db_session)
    register(db_session, add_student(db_session, "Alice", "Martin"), course)
    add_student(db_session, "Bob", "Durand")

    students = get_course_students(db_session, course.id)
    assert [s.first_name for s in students] == ["Alice"]


def test_get_course_students_cours_introuvable(db_session):
    with pytest.raises(NotFoundError):
        get_course_students(db_session, uuid.uuid4())


def test_delete_course(db_session):
    course = add_course(db_session)
    delete_course(db_session, course.id)
    with pytest.raises(NotFoundError):
        get_course(db_session, course.id)


# --- Inscriptions ---

def test_create_registration_succes(db_session):
    student = add_student(db_session)
    course = add_course(db_session)

    result = create_registration(db_session, CourseRegistrationCreate(student_id=student.id, course_id=course.id))

    assert result.student.id == student.id
    assert result.course.course_code == "MTH101"
    assert is_registered(db_session, student.id, course.id)


def test_create_registration_doublon(db_session):
    student = add_student(db_session)
    course = add_course(db_session)
    register(db_session, student, course)

    with pytest.raises(ConflictError, match="Student is already registered for this course"):
        create_registration(db_session, CourseRegistrationCreate(student_id=student.id, course_id=course.id))


def test_create_registration_eleve_introuvable(db_session):
    course = add_course(db_session)
    with pytest.raises(NotFoundError, match="Student not found"):
        create_registration(db_session, CourseRegistrationCreate(student_id=uuid.uuid4(), course_id=course.id))


def test_create_registration_cours_introuvable(db_session):
    student = add_student(db_session)
    with pytest.raises(NotFoundError, match="Course not found"):
        create_registration(db_session, CourseRegistrationCreate(student_id=student.id, course_id=uuid.uuid4()))


def test_get_registrations_filtres(db_session):
    alice = add_student(db_session, "Alice", "Martin")
    bob = add_student(db_session, "Bob", "Durand")
    algebra = add_course(db_session, "MTH101", "Algebra")
    physics = add_course(db_session, "PHY101", "Physics")
    register(db_session, alice, algebra)
    register(db_session, alice, physics)
    register(db_session, bob, physics)

    _, total = get_registrations(db_session, PaginationRequest(), student_id=alice.id)
    assert total == 2

    items, total = get_registrations(db_session, PaginationRequest(), course_id=algebra.id)
    assert total == 1
    assert items[0].student.first_name == "Alice"

    _, total = get_registrations(db_session, PaginationRequest(search="physics"))
    assert total == 2


def test_delete_registration(db_session):
    registration = register(db_session, add_student(db_session), add_course(db_session))
    delete_registration(db_session, registration.id)
    with pytest.raises(NotFoundError, match="Course registration not found"):
        get_registration(db_session, registration.id)
