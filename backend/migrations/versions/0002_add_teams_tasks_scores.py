"""add teams, team members, tasks, task scores and active attendance index

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

ACTIVE_ATTENDANCE = sa.text("clock_in IS NOT NULL AND clock_out IS NULL")


def upgrade():
    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "team_members",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("team_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_team_members_student_id", "team_members", ["student_id"])
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.Column("max_obtainable_score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("course_id", "title", name="uq_tasks_course_title"),
        sa.CheckConstraint("max_obtainable_score > 0", name="ck_tasks_max_score_positive"),
    )
    op.create_index("ix_tasks_course_id", "tasks", ["course_id"])

    op.create_table(
        "task_scores",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("task_id", "student_id", name="uq_task_scores_task_student"),
        sa.CheckConstraint("score >= 0", name="ck_task_scores_score_non_negative"),
    )
    op.create_index("ix_task_scores_student_id", "task_scores", ["student_id"])

    # Un seul enregistrement de présence actif par élève
    op.create_index(
        "uq_attendances_active_student",
        "attendances",
        ["student_id"],
        unique=True,
        postgresql_where=ACTIVE_ATTENDANCE,
        sqlite_where=ACTIVE_ATTENDANCE,
    )


def downgrade():
    op.drop_index("uq_attendances_active_student", table_name="attendances")
    op.drop_index("ix_task_scores_student_id", table_name="task_scores")
    op.drop_table("task_scores")
    op.drop_index("ix_tasks_course_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_team_members_team_id", table_name="team_members")
    op.drop_index("ix_team_members_student_id", table_name="team_members")
    op.drop_table("team_members")
    op.drop_table("teams")
