"""init schema

Revision ID: 0001_init_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_init_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("password", sa.String(length=512), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teachers_row_number", "teachers", ["row_number"], unique=False)
    op.create_index("ix_teachers_username", "teachers", ["username"], unique=False)

    op.create_table(
        "behaviors",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_behaviors_row_number", "behaviors", ["row_number"], unique=False)

    op.create_table(
        "classes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_classes_row_number", "classes", ["row_number"], unique=False)

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("student_code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("class_name", sa.String(length=64), nullable=False),
        sa.Column("initial_score", sa.Integer(), nullable=False),
        sa.Column("deducted_score", sa.Integer(), nullable=False),
        sa.Column("added_score", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_row_number", "students", ["row_number"], unique=False)
    op.create_index("ix_students_student_code", "students", ["student_code"], unique=False)

    op.create_table(
        "infractions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("student_name", sa.String(length=255), nullable=False),
        sa.Column("student_class", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("behavior_id", sa.String(length=36), nullable=False),
        sa.Column("comment", sa.String(length=1024), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_infractions_row_number", "infractions", ["row_number"], unique=False)
    op.create_index("ix_infractions_student_id", "infractions", ["student_id"], unique=False)
    op.create_index("ix_infractions_date", "infractions", ["date"], unique=False)
    op.create_index("ix_infractions_behavior_id", "infractions", ["behavior_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_infractions_behavior_id", table_name="infractions")
    op.drop_index("ix_infractions_date", table_name="infractions")
    op.drop_index("ix_infractions_student_id", table_name="infractions")
    op.drop_index("ix_infractions_row_number", table_name="infractions")
    op.drop_table("infractions")

    op.drop_index("ix_students_student_code", table_name="students")
    op.drop_index("ix_students_row_number", table_name="students")
    op.drop_table("students")

    op.drop_index("ix_classes_row_number", table_name="classes")
    op.drop_table("classes")

    op.drop_index("ix_behaviors_row_number", table_name="behaviors")
    op.drop_table("behaviors")

    op.drop_index("ix_teachers_username", table_name="teachers")
    op.drop_index("ix_teachers_row_number", table_name="teachers")
    op.drop_table("teachers")
