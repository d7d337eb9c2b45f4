"""
Router pour les élèves.
CRUD complet : listage paginé, détail, création, modification, suppression.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.common import ApiResponse, MetaData
from student_records.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from student_records.services import student_service

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])


@router.get("", response_model=ApiResponse[List[StudentResponse]], summary="Lister les élèves")
def list_students(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Recherche sur prénom, nom et email. Tri : firstName, lastName, email, createdAt."""
    students, total = student_service.get_students(db, pagination)
    return ApiResponse.ok(
        students,
        "Students retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("/{student_id}", response_model=ApiResponse[StudentResponse], summary="Détail d'un élève")
def get_student(student_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(student_service.get_student(db, student_id), "Student retrieved successfully")


@router.post("", response_model=ApiResponse[StudentResponse], status_code=201, summary="Créer un élève")
def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    """Crée un élève. Email déjà utilisé → 409."""
    return ApiResponse.created(student_service.create_student(db, data), "Student created successfully")


@router.put("/{student_id}", response_model=ApiResponse[StudentResponse], summary="Modifier un élève")
def update_student(student_id: uuid.UUID, data: StudentUpdate, db: Session = Depends(get_db)):
    """Met à jour les champs fournis. Les champs absents ne sont pas modifiés."""
    return ApiResponse.ok(student_service.update_student(db, student_id, data), "Student updated successfully")


@router.delete("/{student_id}", response_model=ApiResponse[None], summary="Supprimer un élève")
def delete_student(student_id: uuid.UUID, db: Session = Depends(get_db)):
    """Supprime définitivement un élève. Inscriptions, présences et notes sont supprimées en cascade."""
    student_service.delete_student(db, student_id)
    return ApiResponse.ok(message="Student deleted successfully")
