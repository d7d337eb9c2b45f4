"""
Tests d'intégration API pour le pointage et les présences.
POST /api/v1/attendance/clockin  — pointage d'entrée
POST /api/v1/attendance/clockout — pointage de sortie
GET/POST/PUT/DELETE /api/v1/attendance — gestion manuelle
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import patch

from student_records.exceptions import ConflictError, NotFoundError
from student_records.schemas.attendance import AttendanceResponse
from student_records.schemas.course import CourseSummary
from student_records.schemas.student import StudentResponse


# --- Helpers ---

def make_attendance(clock_out=None) -> AttendanceResponse:
    student_id, course_id = uuid.uuid4(), uuid.uuid4()
    now = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
    return AttendanceResponse(
        id=uuid.uuid4(),
        student_id=student_id,
        course_id=course_id,
        clock_in=now,
        clock_out=clock_out,
        created_at=now,
        student=StudentResponse(
            id=student_id, first_name="Ada", last_name="Lovelace",
            email="ada@school.test", phone_number=None, gender="F", created_at=now,
        ),
        course=CourseSummary(id=course_id, course_code="MTH101", course_title="Algebra", created_at=now),
    )


def clock_body():
    return {"studentId": str(uuid.uuid4()), "courseId": str(uuid.uuid4())}


# ============================================================
# POST /api/v1/attendance/clockin
# ============================================================

def test_clock_in_succes(client):
    attendance = make_attendance()
    with patch("student_records.services.attendance_service.clock_in", return_value=attendance):
        response = client.post("/api/v1/attendance/clockin", json=clock_body())

    assert response.status_code == 201
    body = response.json()
    assert body["status"] is True
    assert body["statusCode"] == 201
    assert body["message"] == "Student clocked in successfully"
    assert body["results"]["clockIn"] is not None
    assert body["results"]["clockOut"] is None
    assert body["results"]["student"]["firstName"] == "Ada"


def test_clock_in_deja_pointe(client):
    with patch(
        "student_records.services.attendance_service.clock_in",
        side_effect=ConflictError("Student is already clocked in"),
    ):
        response = client.post("/api/v1/attendance/clockin", json=clock_body())

    assert response.status_code == 409
    body = response.json()
    assert body["status"] is False
    assert body["statusCode"] == 409
    assert body["message"] == "Student is already clocked in"
    assert body["results"] is None


def test_clock_in_eleve_introuvable(client):
    with patch(
        "student_records.services.attendance_service.clock_in",
        side_effect=NotFoundError("Student not found"),
    ):
        response = client.post("/api/v1/attendance/clockin", json=clock_body())

    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"


def test_clock_in_corps_invalide(client):
    response = client.post("/api/v1/attendance/clockin", json={"studentId": "pas-un-uuid"})
    assert response.status_code == 422


# ============================================================
# POST /api/v1/attendance/clockout
# ============================================================

def test_clock_out_succes(client):
    attendance = make_attendance(clock_out=datetime(2026, 10, 17, 11, 0, tzinfo=timezone.utc))
    with patch("student_records.services.attendance_service.clock_out", return_value=attendance):
        response = client.post("/api/v1/attendance/clockout", json=clock_body())

    assert response.status_code == 200
    assert response.json()["message"] == "Student clocked out successfully"
    assert response.json()["results"]["clockOut"] is not None


def test_clock_out_sans_presence_active(client):
    with patch(
        "student_records.services.attendance_service.clock_out",
        side_effect=NotFoundError("No active attendance record found for student"),
    ):
        response = client.post("/api/v1/attendance/clockout", json=clock_body())

    assert response.status_code == 404
    assert response.json()["message"] == "No active attendance record found for student"


# ============================================================
# Gestion manuelle
# ============================================================

def test_list_attendances_pagination(client):
    with patch(
        "student_records.services.attendance_service.get_attendances",
        return_value=([make_attendance()], 41),
    ) as mock_list:
        response = client.get("/api/v1/attendance?pageIndex=2&pageSize=20&sortBy=clockIn")

    assert response.status_code == 200
    meta = response.json()["metaData"]
    assert meta == {
        "pageIndex": 2,
        "pageSize": 20,
        "totalCount": 41,
        "totalPages": 3,
        "showing": "Showing 21 to 40 of 41 entries",
    }
    pagination = mock_list.call_args.args[1]
    assert pagination.sort_by == "clockIn"


def test_list_student_attendances(client):
    student_id = uuid.uuid4()
    with patch(
        "student_records.services.attendance_service.get_attendances",
        return_value=([], 0),
    ) as mock_list:
        response = client.get(f"/api/v1/attendance/student/{student_id}")

    assert response.status_code == 200
    assert response.json()["metaData"]["showing"] == "No entries found"
    assert mock_list.call_args.kwargs["student_id"] == student_id


def test_get_attendance_introuvable(client):
    with patch(
        "student_records.services.attendance_service.get_attendance",
        side_effect=NotFoundError("Attendance record not found"),
    ):
        response = client.get(f"/api/v1/attendance/{uuid.uuid4()}")
    assert response.status_code == 404


def test_delete_attendance(client):
    with patch("student_records.services.attendance_service.delete_attendance") as mock_delete:
        response = client.delete(f"/api/v1/attendance/{uuid.uuid4()}")

    assert response.status_code == 200
    assert response.json()["message"] == "Attendance record deleted successfully"
    mock_delete.assert_called_once()
