# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, les FK comme task_scores.task_id → tasks.id échouent
# avec NoReferencedTableError si task.py n'est pas chargé.

from student_records.models.student import Student  # noqa: F401
from student_records.models.course import Course, CourseRegistration  # noqa: F401
from student_records.models.attendance import Attendance  # noqa: F401
from student_records.models.team import Team, TeamMember  # noqa: F401
from student_records.models.task import Task, TaskScore  # noqa: F401
