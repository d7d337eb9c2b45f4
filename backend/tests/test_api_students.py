"""
Tests d'intégration API pour les élèves.
GET    /api/v1/students      — listage paginé
GET    /api/v1/students/{id} — détail
POST   /api/v1/students      — création
PUT    /api/v1/students/{id} — mise à jour
DELETE /api/v1/students/{id} — suppression
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from student_records.exceptions import ConflictError, NotFoundError
from student_records.schemas.student import StudentResponse


# --- Helpers ---

def make_student(**kwargs) -> StudentResponse:
    return StudentResponse(
        id=kwargs.get("id", uuid.uuid4()),
        first_name=kwargs.get("first_name", "Alice"),
        last_name=kwargs.get("last_name", "Martin"),
        email=kwargs.get("email", "alice@school.test"),
        phone_number=kwargs.get("phone_number"),
        gender=kwargs.get("gender", "F"),
        created_at=kwargs.get("created_at", datetime.now()),
    )


VALID_BODY = {
    "firstName": "Alice",
    "lastName": "Martin",
    "email": "alice@school.test",
    "gender": "F",
}


def test_list_students(client):
    with patch(
        "student_records.services.student_service.get_students",
        return_value=([make_student(), make_student(first_name="Bob")], 2),
    ):
        response = client.get("/api/v1/students")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Students retrieved successfully"
    assert [s["firstName"] for s in body["results"]] == ["Alice", "Bob"]
    assert body["metaData"]["totalCount"] == 2


def test_list_students_page_size_plafonnee(client):
    with patch(
        "student_records.services.student_service.get_students",
        return_value=([], 0),
    ) as mock_list:
        response = client.get("/api/v1/students?pageSize=150")

    assert response.status_code == 200
    assert response.json()["metaData"]["pageSize"] == 100
    assert mock_list.call_args.args[1].page_size == 100


def test_list_students_page_index_invalide(client):
    response = client.get("/api/v1/students?pageIndex=0")
    assert response.status_code == 422


def test_get_student_introuvable(client):
    with patch(
        "student_records.services.student_service.get_student",
        side_effect=NotFoundError("Student not found"),
    ):
        response = client.get(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["status"] is False


def test_create_student_succes(client):
    with patch("student_records.services.student_service.create_student", return_value=make_student()):
        response = client.post("/api/v1/students", json=VALID_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Student created successfully"
    assert body["results"]["email"] == "alice@school.test"


def test_create_student_email_duplique(client):
    with patch(
        "student_records.services.student_service.create_student",
        side_effect=ConflictError("Student with this email already exists"),
    ):
        response = client.post("/api/v1/students", json=VALID_BODY)

    assert response.status_code == 409
    assert response.json()["message"] == "Student with this email already exists"


def test_create_student_email_invalide(client):
    response = client.post("/api/v1/students", json={**VALID_BODY, "email": "pas-un-email"})
    assert response.status_code == 422


def test_create_student_prenom_vide(client):
    response = client.post("/api/v1/students", json={**VALID_BODY, "firstName": "   "})
    assert response.status_code == 422


def test_update_student(client):
    with patch(
        "student_records.services.student_service.update_student",
        return_value=make_student(last_name="Bernard"),
    ) as mock_update:
        response = client.put(f"/api/v1/students/{uuid.uuid4()}", json={"lastName": "Bernard"})

    assert response.status_code == 200
    assert response.json()["results"]["lastName"] == "Bernard"
    data = mock_update.call_args.args[2]
    assert data.model_dump(exclude_unset=True) == {"last_name": "Bernard"}


def test_delete_student(client):
    with patch("student_records.services.student_service.delete_student"):
        response = client.delete(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 200
    assert response.json()["message"] == "Student deleted successfully"
    assert response.json()["results"] is None


def test_update_student_prenom_null(client):
    """Null explicite sur une colonne obligatoire → 422, le service n'est pas appelé."""
    with patch("student_records.services.student_service.update_student") as mock_update:
        response = client.put(f"/api/v1/students/{uuid.uuid4()}", json={"firstName": None})

    assert response.status_code == 422
    mock_update.assert_not_called()
