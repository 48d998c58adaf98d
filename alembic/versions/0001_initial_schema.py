"""Create study planning tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "study_plans",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("plan_name", sa.String(length=255), nullable=False),
        sa.Column("exam_date", sa.Date(), nullable=False),
        sa.Column("study_hours_per_day", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("session_duration_minutes", sa.Integer(), server_default=sa.text("50"), nullable=False),
        sa.Column("has_essay", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("review_mode", sa.String(length=20), server_default=sa.text("'full'"), nullable=False),
        sa.Column("daily_question_goal", sa.Integer(), server_default=sa.text("50"), nullable=False),
        sa.Column("weekly_question_goal", sa.Integer(), server_default=sa.text("300"), nullable=False),
        sa.Column("postponement_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_study_plans_user_id", "study_plans", ["user_id"], unique=False)

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("study_plan_id", sa.Integer(), nullable=False),
        sa.Column("subject_name", sa.String(length=255), nullable=False),
        sa.Column("priority_weight", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.ForeignKeyConstraint(["study_plan_id"], ["study_plans.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_subjects_study_plan_id", "subjects", ["study_plan_id"], unique=False)

    op.create_table(
        "topics",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_topics_subject_id", "topics", ["subject_id"], unique=False)

    op.create_table(
        "study_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("study_plan_id", sa.Integer(), nullable=False),
        sa.Column("topic_id", sa.Integer(), nullable=True),
        sa.Column("subject_name", sa.String(length=255), nullable=False),
        sa.Column("topic_description", sa.Text(), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("session_type", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("questions_solved", sa.Integer(), nullable=True),
        sa.Column("time_studied_seconds", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.ForeignKeyConstraint(["study_plan_id"], ["study_plans.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_study_sessions_study_plan_id", "study_sessions", ["study_plan_id"], unique=False)
    op.create_index("ix_study_sessions_topic_id", "study_sessions", ["topic_id"], unique=False)
    op.create_index("ix_study_sessions_session_date", "study_sessions", ["session_date"], unique=False)
    op.create_index(
        "ix_study_sessions_plan_status_date",
        "study_sessions",
        ["study_plan_id", "status", "session_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_study_sessions_plan_status_date", table_name="study_sessions")
    op.drop_index("ix_study_sessions_session_date", table_name="study_sessions")
    op.drop_index("ix_study_sessions_topic_id", table_name="study_sessions")
    op.drop_index("ix_study_sessions_study_plan_id", table_name="study_sessions")
    op.drop_table("study_sessions")

    op.drop_index("ix_topics_subject_id", table_name="topics")
    op.drop_table("topics")

    op.drop_index("ix_subjects_study_plan_id", table_name="subjects")
    op.drop_table("subjects")

    op.drop_index("ix_study_plans_user_id", table_name="study_plans")
    op.drop_table("study_plans")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
