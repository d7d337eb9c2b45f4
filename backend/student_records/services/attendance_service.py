"""
Service métier pour les présences : pointage d'entrée / de sortie et notation automatique.

Pointage d'entrée (clock_in), dans une seule transaction :
1. Cherche la tâche de présence du jour pour le cours (même titre, créée le même jour UTC)
2. La crée si la recherche ne trouve rien : c'est le premier pointage du jour pour ce cours
3. Insère la présence active (clock_in = maintenant, clock_out = NULL)
4. Insère la note de présence de l'élève pour cette tâche

Tout est commité en une fois ; en cas d'erreur rien n'est conservé.
La contrainte uq_tasks_course_title garantit une seule tâche par cours et par jour :
si un pointage simultané l'a créée entre-temps, la transaction est rejouée une fois.
"""

import uuid
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.config import settings
from student_records.database import utcnow
from student_records.exceptions import ConflictError, NotFoundError
from student_records.models.attendance import Attendance
from student_records.models.course import Course
from student_records.models.student import Student
from student_records.models.task import Task, TaskScore
from student_records.pagination import PaginationRequest, apply_search, apply_sorting, paginate
from student_records.schemas.attendance import (
    AttendanceCreate,
    AttendanceResponse,
    AttendanceUpdate,
    ClockInRequest,
    ClockOutRequest,
)
from student_records.schemas.course import CourseSummary
from student_records.schemas.student import StudentResponse

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "student": Student.first_name,
    "clockin": Attendance.clock_in,
    "clockout": Attendance.clock_out,
    "createdat": Attendance.created_at,
}

ALREADY_CLOCKED_IN = "Student is already clocked in"


def attendance_task_title(course_title: str, day: date) -> str:
    """Ex : "Algebra Attendance for Saturday 17 October, 2026"."""
    return f"{course_title} Attendance for {day:%A} {day.day} {day:%B}, {day.year}"


def _as_utc(moment: datetime) -> datetime:
    """Les horodatages naïfs sont considérés comme déjà exprimés en UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Début et fin (exclue) du jour calendaire UTC contenant `moment`."""
    moment = _as_utc(moment)
    start = datetime.combine(moment.date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def _active_attendance_query(student_id: uuid.UUID):
    return select(Attendance).where(
        Attendance.student_id == student_id,
        Attendance.clock_in.is_not(None),
        Attendance.clock_out.is_(None),
    )


def _find_daily_task(db: Session, course_id: uuid.UUID, title: str, now: datetime) -> Optional[Task]:
    day_start, day_end = _day_bounds(now)
    return db.execute(
        select(Task).where(
            Task.course_id == course_id,
            Task.title == title,
            Task.created_at >= day_start,
            Task.created_at < day_end,
        ).limit(1)
    ).scalar()


def clock_in(db: Session, data: ClockInRequest, now: Optional[datetime] = None) -> AttendanceResponse:
    """
    Pointe l'entrée d'un élève à un cours et lui attribue la note de présence du jour.

    Préconditions, vérifiées dans l'ordre :
    1. L'élève existe (NotFoundError)
    2. Le cours existe (NotFoundError)
    3. L'élève n'a aucune présence active, quel que soit le cours (ConflictError)

    La tâche du jour est créée dès que la recherche ne la trouve pas.
    """
    student = db.get(Student, data.student_id)
    if student is None:
        raise NotFoundError("Student not found")

    course = db.get(Course, data.course_id)
    if course is None:
        raise NotFoundError("Course not found")

    active = db.execute(_active_attendance_query(data.student_id).limit(1)).scalar()
    if active is not None:
        raise ConflictError(ALREADY_CLOCKED_IN)

    now = _as_utc(now or utcnow())
    title = attendance_task_title(course.course_title, now.date())

    for attempt in range(2):
        try:
            attendance, task, task_created = _record_clock_in(db, student, course, title, now)
            break
        except IntegrityError:
            db.rollback()
            # Pointage simultané du même élève : l'index unique partiel a rejeté le second
            if db.execute(_active_attendance_query(data.student_id).limit(1)).scalar() is not None:
                raise ConflictError(ALREADY_CLOCKED_IN)
            if attempt:
                raise
            logger.info("Tâche de présence créée en parallèle pour %s, nouvel essai", course.course_code)
        except Exception:
            db.rollback()
            raise

    db.refresh(attendance)

    logger.info(
        "Pointage entrée : élève %s, cours %s (tâche %s%s)",
        student.id, course.course_code, task.id, " créée" if task_created else "",
    )
    return _to_response(attendance, student, course)


def _record_clock_in(
    db: Session,
    student: Student,
    course: Course,
    title: str,
    now: datetime,
) -> tuple[Attendance, Task, bool]:
    """Tâche du jour (trouvée ou créée), présence et note, puis commit."""
    task = _find_daily_task(db, course.id, title, now)

    task_created = task is None
    if task_created:
        task = Task(
            title=title,
            description=f"Daily attendance task for {course.course_title}",
            course_id=course.id,
            max_obtainable_score=settings.ATTENDANCE_TASK_MAX_SCORE,
            created_at=now,
        )
        db.add(task)
        db.flush()  # Obtenir l'ID de la tâche avant d'insérer la note

    attendance = Attendance(
        student_id=student.id,
        course_id=course.id,
        clock_in=now,
        clock_out=None,
        created_at=now,
    )
    db.add(attendance)

    # Un élève qui repointe le même jour garde sa note : (tâche, élève) est unique
    already_scored = not task_created and db.execute(
        select(TaskScore.id).where(
            TaskScore.task_id == task.id,
            TaskScore.student_id == student.id,
        ).limit(1)
    ).scalar() is not None

    if not already_scored:
        db.add(TaskScore(
            task_id=task.id,
            student_id=student.id,
            score=settings.ATTENDANCE_TASK_SCORE,
            created_at=now,
        ))

    db.commit()
    return attendance, task, task_created


def clock_out(db: Session, data: ClockOutRequest, now: Optional[datetime] = None) -> AttendanceResponse:
    """Pointe la sortie : clôture la présence active de l'élève pour ce cours. Aucune notation."""
    row = db.execute(
        select(Attendance, Student, Course)
        .join(Student, Student.id == Attendance.student_id)
        .join(Course, Course.id == Attendance.course_id)
        .where(
            Attendance.student_id == data.student_id,
            Attendance.course_id == data.course_id,
            Attendance.clock_in.is_not(None),
            Attendance.clock_out.is_(None),
        )
        .limit(1)
    ).first()

    if row is None:
        raise NotFoundError("No active attendance record found for student")

    attendance, student, course = row
    attendance.clock_out = _as_utc(now or utcnow())
    db.commit()
    db.refresh(attendance)

    logger.info("Pointage sortie : élève %s, cours %s", student.id, course.course_code)
    return _to_response(attendance, student, course)


def _base_query():
    return (
        select(Attendance, Student, Course)
        .join(Student, Student.id == Attendance.student_id)
        .join(Course, Course.id == Attendance.course_id)
    )


def get_attendances(
    db: Session,
    pagination: PaginationRequest,
    student_id: Optional[uuid.UUID] = None,
) -> tuple[list[AttendanceResponse], int]:
    """Liste paginée des présences (recherche sur l'élève), plus récentes d'abord par défaut."""
    stmt = _base_query()
    if student_id is not None:
        stmt = stmt.where(Attendance.student_id == student_id)

    stmt = apply_search(stmt, pagination.search, Student.first_name, Student.last_name, Student.email)
    stmt = apply_sorting(stmt, pagination, SORT_COLUMNS, default=[Attendance.created_at.desc()])
    rows, total = paginate(db, stmt, pagination, scalars=False)
    return [_to_response(*row) for row in rows], total


def get_attendance(db: Session, attendance_id: uuid.UUID) -> AttendanceResponse:
    row = db.execute(_base_query().where(Attendance.id == attendance_id)).first()
    if row is None:
        raise NotFoundError("Attendance record not found")
    return _to_response(*row)


def create_attendance(db: Session, data: AttendanceCreate) -> AttendanceResponse:
    """Saisie manuelle d'une présence, sans notation automatique."""
    student = db.get(Student, data.student_id)
    if student is None:
        raise NotFoundError("Student not found")

    course = db.get(Course, data.course_id)
    if course is None:
        raise NotFoundError("Course not found")

    attendance = Attendance(
        student_id=data.student_id,
        course_id=data.course_id,
        clock_in=data.clock_in,
        clock_out=data.clock_out,
    )
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(ALREADY_CLOCKED_IN)
    db.refresh(attendance)
    return _to_response(attendance, student, course)


def update_attendance(db: Session, attendance_id: uuid.UUID, data: AttendanceUpdate) -> AttendanceResponse:
    """Met à jour clock_in / clock_out uniquement."""
    attendance = db.get(Attendance, attendance_id)
    if attendance is None:
        raise NotFoundError("Attendance record not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(attendance, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(ALREADY_CLOCKED_IN)
    return get_attendance(db, attendance_id)


def delete_attendance(db: Session, attendance_id: uuid.UUID) -> None:
    attendance = db.get(Attendance, attendance_id)
    if attendance is None:
        raise NotFoundError("Attendance record not found")

    db.delete(attendance)
    db.commit()


def _to_response(attendance: Attendance, student: Student, course: Course) -> AttendanceResponse:
    return AttendanceResponse(
        id=attendance.id,
        student_id=attendance.student_id,
        course_id=attendance.course_id,
        clock_in=attendance.clock_in,
        clock_out=attendance.clock_out,
        created_at=attendance.created_at,
        student=StudentResponse.model_validate(student),
        course=CourseSummary.model_validate(course),
    )
