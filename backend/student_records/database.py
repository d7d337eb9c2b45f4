"""
Configuration de la connexion à la base de données.
Utilise SQLAlchemy avec un moteur synchrone (PostgreSQL en production).
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from student_records.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    """Horodatage UTC courant, utilisé pour tous les created_at / clock_in / clock_out."""
    return datetime.now(timezone.utc)


def get_db():
    """Dépendance FastAPI — fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
