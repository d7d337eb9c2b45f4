"""
Point d'entrée principal de l'API Student Records.
Démarrage : uvicorn student_records.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

import student_records.models  # noqa: F401 — enregistre tous les modèles dans Base.metadata avant les routers
from student_records.config import settings
from student_records.database import utcnow
from student_records.exceptions import AppError
from student_records.routers import attendance, course_registrations, courses, students, task_scores, tasks, teams
from student_records.schemas.common import ApiResponse, ErrorResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : configure le logging au démarrage."""
    configure_logging()
    logger.info("Student Records API démarrée (env=%s)", settings.ENV)
    yield
    logger.info("Student Records API arrêtée")


app = FastAPI(
    title="Student Records API",
    description="API de gestion des élèves, cours, présences et notes",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — allow_origin_regex est nécessaire pour les requêtes preflight POST avec Content-Type JSON.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(students.router)
app.include_router(courses.router)
app.include_router(course_registrations.router)
app.include_router(attendance.router)
app.include_router(tasks.router)
app.include_router(task_scores.router)
app.include_router(teams.router)
app.include_router(teams.members_router)


def _envelope(status_code: int, message: str) -> JSONResponse:
    body = ApiResponse.fail(message, status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def _error(status_code: int, message: str, error_code: str) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=error_code, timestamp=utcnow())
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Erreurs métier levées par les services → enveloppe avec status=false."""
    logger.warning("%s %s → %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError) -> JSONResponse:
    logger.warning("Conflit de concurrence sur %s %s : %s", request.method, request.url.path, exc)
    return _envelope(409, "Concurrency error occurred")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Erreur base de données sur %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Database operation failed.", "DATABASE_ERROR")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    Le message de l'exception n'est jamais renvoyé au client.
    """
    logger.error("Exception non gérée sur %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "An internal server error occurred", "INTERNAL_ERROR")


@app.get("/api/health", response_class=PlainTextResponse, tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return "API is running"
