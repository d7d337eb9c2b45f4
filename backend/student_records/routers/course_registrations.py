"""
Router pour les inscriptions des élèves aux cours.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.course import CourseRegistrationCreate, CourseRegistrationResponse
from student_records.services import course_registration_service

router = APIRouter(prefix="/api/v1/courseregistrations", tags=["Inscriptions"])


def _page(registrations, total, pagination: PaginationRequest, message: str):
    return ApiResponse.ok(
        registrations,
        message,
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("", response_model=ApiResponse[List[CourseRegistrationResponse]], summary="Lister les inscriptions")
def list_registrations(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    registrations, total = course_registration_service.get_registrations(db, pagination)
    return _page(registrations, total, pagination, "Course registrations retrieved successfully")


@router.get(
    "/student/{student_id}",
    response_model=ApiResponse[List[CourseRegistrationResponse]],
    summary="Inscriptions d'un élève",
)
def list_student_registrations(
    student_id: uuid.UUID,
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    registrations, total = course_registration_service.get_registrations(db, pagination, student_id=student_id)
    return _page(registrations, total, pagination, "Student course registrations retrieved successfully")


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[List[CourseRegistrationResponse]],
    summary="Inscriptions à un cours",
)
def list_course_registrations(
    course_id: uuid.UUID,
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    registrations, total = course_registration_service.get_registrations(db, pagination, course_id=course_id)
    return _page(registrations, total, pagination, "Course registrations retrieved successfully")


@router.get(
    "/{registration_id}",
    response_model=ApiResponse[CourseRegistrationResponse],
    summary="Détail d'une inscription",
)
def get_registration(registration_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(
        course_registration_service.get_registration(db, registration_id),
        "Course registration retrieved successfully",
    )


@router.post(
    "",
    response_model=ApiResponse[CourseRegistrationResponse],
    status_code=201,
    summary="Inscrire un élève à un cours",
)
def create_registration(data: CourseRegistrationCreate, db: Session = Depends(get_db)):
    """Élève ou cours introuvable → 404. Inscription déjà existante → 409."""
    return ApiResponse.created(
        course_registration_service.create_registration(db, data),
        "Course registration created successfully",
    )


@router.delete("/{registration_id}", response_model=ApiResponse[None], summary="Supprimer une inscription")
def delete_registration(registration_id: uuid.UUID, db: Session = Depends(get_db)):
    course_registration_service.delete_registration(db, registration_id)
    return ApiResponse.ok(message="Course registration deleted successfully")
