"""
Tests unitaires pour le service des élèves.
"""

import uuid
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from factories import add_student
from student_records.exceptions import ConflictError, NotFoundError
from student_records.pagination import PaginationRequest
from student_records.schemas.student import StudentCreate, StudentUpdate
from student_records.services.student_service import (
    create_student,
    delete_student,
    get_student,
    get_students,
    update_student,
)


def student_payload(**kwargs) -> StudentCreate:
    data = {
        "first_name": "Alice",
        "last_name": "Martin",
        "email": "alice@school.test",
        "gender": "F",
    }
    data.update(kwargs)
    return StudentCreate(**data)


# --- Validation des schémas ---

def test_student_create_prenom_vide_rejete():
    with pytest.raises(ValidationError):
        student_payload(first_name="   ")


def test_student_create_email_invalide_rejete():
    with pytest.raises(ValidationError):
        student_payload(email="pas-un-email")


def test_student_update_null_explicite_rejete():
    for field in ("firstName", "lastName", "email", "gender"):
        with pytest.raises(ValidationError):
            StudentUpdate.model_validate({field: None})


def test_student_update_telephone_null_autorise():
    assert StudentUpdate.model_validate({"phoneNumber": None}).phone_number is None


def test_student_create_accepte_camel_case():
    s = StudentCreate(firstName="Alice", lastName="Martin", email="alice@school.test", gender="F")
    assert s.first_name == "Alice"


# --- MagicMock : chemins simples ---

def test_get_student_introuvable():
    db = MagicMock()
    db.get.return_value = None
    with pytest.raises(NotFoundError, match="Student not found"):
        get_student(db, uuid.uuid4())


def test_delete_student_introuvable():
    db = MagicMock()
    db.get.return_value = None
    with pytest.raises(NotFoundError):
        delete_student(db, uuid.uuid4())
    db.commit.assert_not_called()


# --- SQLite ---

def test_create_student_succes(db_session):
    result = create_student(db_session, student_payload(phone_number="0470000000"))
    assert result.id is not None
    assert result.phone_number == "0470000000"
    assert result.created_at is not None


def test_create_student_email_duplique(db_session):
    create_student(db_session, student_payload())
    with pytest.raises(ConflictError, match="Student with this email already exists"):
        create_student(db_session, student_payload(first_name="Autre"))


def test_update_student_champs_partiels(db_session):
    student = add_student(db_session, "Alice", "Martin")
    result = update_student(db_session, student.id, StudentUpdate(last_name="Bernard"))
    assert result.first_name == "Alice"
    assert result.last_name == "Bernard"


def test_update_student_email_deja_pris(db_session):
    add_student(db_session, "Alice", "Martin", email="alice@school.test")
    bob = add_student(db_session, "Bob", "Durand", email="bob@school.test")
    with pytest.raises(ConflictError):
        update_student(db_session, bob.id, StudentUpdate(email="alice@school.test"))


def test_update_student_meme_email_autorise(db_session):
    alice = add_student(db_session, "Alice", "Martin", email="alice@school.test")
    result = update_student(db_session, alice.id, StudentUpdate(email="alice@school.test"))
    assert result.email == "alice@school.test"


def test_get_students_tri_et_recherche(db_session):
    add_student(db_session, "Charlie", "Zed")
    add_student(db_session, "Alice", "Martin")
    add_student(db_session, "Bob", "Durand")

    items, total = get_students(db_session, PaginationRequest())
    assert total == 3
    assert [s.first_name for s in items] == ["Alice", "Bob", "Charlie"]

    items, total = get_students(db_session, PaginationRequest(search="dur"))
    assert total == 1
    assert items[0].first_name == "Bob"


def test_delete_student(db_session):
    student = add_student(db_session)
    delete_student(db_session, student.id)
    with pytest.raises(NotFoundError):
        get_student(db_session, student.id)
