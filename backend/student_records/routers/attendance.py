"""
Router pour les présences.
Pointage d'entrée / de sortie et gestion manuelle des enregistrements.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.database import get_db
from student_records.pagination import PaginationRequest, get_pagination
from student_records.schemas.attendance import (
    AttendanceCreate,
    AttendanceResponse,
    AttendanceUpdate,
    ClockInRequest,
    ClockOutRequest,
)
from student_records.schemas.common import ApiResponse, MetaData
from student_records.services import attendance_service

router = APIRouter(prefix="/api/v1/attendance", tags=["Présences"])


@router.post(
    "/clockin",
    response_model=ApiResponse[AttendanceResponse],
    status_code=201,
    summary="Pointer l'entrée d'un élève",
)
def clock_in(data: ClockInRequest, db: Session = Depends(get_db)):
    """
    Ouvre une présence pour l'élève et lui attribue la note de la tâche de présence du jour.
    La tâche est créée au premier pointage du jour pour le cours.

    Erreurs :
    - 404 : élève ou cours introuvable
    - 409 : l'élève a déjà une présence active (tous cours confondus)
    """
    return ApiResponse.created(attendance_service.clock_in(db, data), "Student clocked in successfully")


@router.post("/clockout", response_model=ApiResponse[AttendanceResponse], summary="Pointer la sortie d'un élève")
def clock_out(data: ClockOutRequest, db: Session = Depends(get_db)):
    """Clôture la présence active de l'élève pour ce cours (404 si aucune)."""
    return ApiResponse.ok(attendance_service.clock_out(db, data), "Student clocked out successfully")


@router.get("", response_model=ApiResponse[List[AttendanceResponse]], summary="Lister les présences")
def list_attendances(
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    attendances, total = attendance_service.get_attendances(db, pagination)
    return ApiResponse.ok(
        attendances,
        "Attendance records retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get(
    "/student/{student_id}",
    response_model=ApiResponse[List[AttendanceResponse]],
    summary="Présences d'un élève",
)
def list_student_attendances(
    student_id: uuid.UUID,
    pagination: PaginationRequest = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    attendances, total = attendance_service.get_attendances(db, pagination, student_id=student_id)
    return ApiResponse.ok(
        attendances,
        "Student attendance records retrieved successfully",
        MetaData.create(pagination.page_index, pagination.page_size, total),
    )


@router.get("/{attendance_id}", response_model=ApiResponse[AttendanceResponse], summary="Détail d'une présence")
def get_attendance(attendance_id: uuid.UUID, db: Session = Depends(get_db)):
    return ApiResponse.ok(
        attendance_service.get_attendance(db, attendance_id),
        "Attendance record retrieved successfully",
    )


@router.post(
    "",
    response_model=ApiResponse[AttendanceResponse],
    status_code=201,
    summary="Saisir une présence manuellement",
)
def create_attendance(data: AttendanceCreate, db: Session = Depends(get_db)):
    """Saisie manuelle, sans création de tâche ni de note."""
    return ApiResponse.created(
        attendance_service.create_attendance(db, data),
        "Attendance record created successfully",
    )


@router.put("/{attendance_id}", response_model=ApiResponse[AttendanceResponse], summary="Modifier une présence")
def update_attendance(attendance_id: uuid.UUID, data: AttendanceUpdate, db: Session = Depends(get_db)):
    return ApiResponse.ok(
        attendance_service.update_attendance(db, attendance_id, data),
        "Attendance record updated successfully",
    )


@router.delete("/{attendance_id}", response_model=ApiResponse[None], summary="Supprimer une présence")
def delete_attendance(attendance_id: uuid.UUID, db: Session = Depends(get_db)):
    attendance_service.delete_attendance(db, attendance_id)
    return ApiResponse.ok(message="Attendance record deleted successfully")
