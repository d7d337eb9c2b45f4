"""
Schémas Pydantic pour les élèves.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from student_records.schemas.common import CamelModel


class StudentCreate(CamelModel):
    """Schéma de création d'un élève (POST /students)."""
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, max_length=20)
    gender: str = Field(max_length=10)

    @field_validator("first_name", "last_name", "gender")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty.")
        return v.strip()


class StudentUpdate(CamelModel):
    """Schéma de mise à jour d'un élève (PUT /students/{id}). Seuls ces champs sont modifiables."""
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=10)

    @field_validator("first_name", "last_name", "email", "gender")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> str:
        # Colonnes NOT NULL : absent = inchangé, null explicite = refusé
        if v is None:
            raise ValueError("Field cannot be null.")
        if not v.strip():
            raise ValueError("Field cannot be empty.")
        return v.strip()


class StudentResponse(CamelModel):
    """Schéma de réponse pour un élève."""
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str]
    gender: str
    created_at: datetime
