"""create organizations, departments and users

Revision ID: 5b1e2c7d9a10
Revises:
Create Date: 2026-10-18 10:12:03.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "5b1e2c7d9a10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_organizations_name", "organizations", ["name"], unique=True)

    # departments.manager_id -> users is added after users exists (FK cycle)
    op.create_table(
        "departments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column(
            "organization_id",
            sa.Uuid(),
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("manager_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "name", name="uq_departments_organization_name"),
    )
    op.create_index("ix_departments_organization_id", "departments", ["organization_id"])
    op.create_index("ix_departments_manager_id", "departments", ["manager_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column(
            "department_id",
            sa.Uuid(),
            sa.ForeignKey("departments.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "manager_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("current_performance_rating", sa.Integer(), nullable=True),
        sa.Column("last_review_notes", sa.String(2000), nullable=True),
        sa.Column("last_review_date", sa.Date(), nullable=True),
        sa.Column("current_goals", sa.String(1000), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('EMPLOYEE','MANAGER','HR_ADMIN','SYSTEM_ADMIN')",
            name="ck_users_role",
        ),
        sa.CheckConstraint(
            "current_performance_rating IS NULL OR current_performance_rating BETWEEN 1 AND 5",
            name="ck_users_performance_rating",
        ),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_department_id", "users", ["department_id"])
    op.create_index("ix_users_manager_id", "users", ["manager_id"])

    with op.batch_alter_table("departments") as batch_op:
        batch_op.create_foreign_key(
            "fk_departments_manager_id_users",
            "users",
            ["manager_id"],
            ["id"],
            ondelete="SET NULL",
        )


def downgrade() -> None:
    with op.batch_alter_table("departments") as batch_op:
        batch_op.drop_constraint("fk_departments_manager_id_users", type_="foreignkey")
    op.drop_table("users")
    op.drop_table("departments")
    op.drop_table("organizations")
