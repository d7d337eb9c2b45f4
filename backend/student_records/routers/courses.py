"""
Router pour les cours.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from student_records.schemas.student import StudentResponse
from student_records.services import course_service

router = APIRouter(prefix="/api/v1/courses", tags=["Cours"])


@router.get("", response_model=ApiResponse[List[CourseResponse]], summary="Lister les cours")
def list_courses(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Recherche sur code et intitulé. Chaque cours porte son nombre d'inscriptions."""
    courses, total = course_service.get_courses(db, pagination)
    return ApiResponse.ok(
        courses,
        "Courses retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get(
    "/students/{course_id}",
    response_model=ApiResponse[List[StudentResponse]],
    summary="Élèves inscrits à un cours",
)
def list_course_students(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(course_service.get_course_students(db, course_id), "Students retrieved successfully")


@router.get("/{course_id}", response_model=ApiResponse[CourseResponse], summary="Détail d'un cours")
def get_course(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(course_service.get_course(db, course_id), "Course retrieved successfully")


@router.post("", response_model=ApiResponse[CourseResponse], status_code=201, summary="Créer un cours")
def create_course(data: CourseCreate, db: Session = Depends(get_db)):
    """Crée un cours avec un code unique (409 sinon)."""
    return ApiResponse.created(course_service.create_course(db, data), "Course created successfully")


@router.put("/{course_id}", response_model=ApiResponse[CourseResponse], summary="Modifier un cours")
def update_course(course_id: uuid.UUID, data: CourseUpdate, db: Session = Depends(get_db)):
    return ApiResponse.ok(course_service.update_course(db, course_id, data), "Course updated successfully")


@router.delete("/{course_id}", response_model=ApiResponse[None], summary="Supprimer un cours")
def delete_course(course_id: uuid.UUID, db: Session = Depends(get_db)):
    """Supprime le cours avec ses inscriptions, présences et tâches (cascade)."""
    course_service.delete_course(db, course_id)
    return ApiResponse.ok(message="Course deleted successfully")
