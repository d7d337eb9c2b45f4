"""
Modèle SQLAlchemy pour la table students.
L'email est unique : un doublon est refusé par le service (409) puis par la contrainte.
"""

import uuid
from sqlalchemy import Column, DateTime, String, Uuid

from student_records.database import Base, utcnow


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone_number = Column(String(20), nullable=True)
    gender = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
