import enum
import uuid
from datetime import date, datetime

from sqlalchemy import String, Boolean, Date, DateTime, ForeignKey, Integer, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from review_system.db.base import Base


class Role(str, enum.Enum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    HR_ADMIN = "HR_ADMIN"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


# Roles eligible to be assigned as someone's manager or a department manager
MANAGER_ROLES = frozenset({Role.MANAGER.value, Role.HR_ADMIN.value, Role.SYSTEM_ADMIN.value})
ADMIN_ROLES = frozenset({Role.HR_ADMIN.value, Role.SYSTEM_ADMIN.value})

RATING_TEXT = {
    1: "Needs Improvement",
    2: "Below Expectations",
    3: "Meets Expectations",
    4: "Exceeds Expectations",
    5: "Outstanding",
}


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('EMPLOYEE','MANAGER','HR_ADMIN','SYSTEM_ADMIN')",
            name="ck_users_role",
        ),
        CheckConstraint(
            "current_performance_rating IS NULL OR current_performance_rating BETWEEN 1 AND 5",
            name="ck_users_performance_rating",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    department_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("departments.id", ondelete="SET NULL"), index=True, nullable=True
    )
    manager_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
    )

    current_performance_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_review_notes: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    last_review_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current_goals: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
    )

    # No reverse collections: direct reports and managed departments can be
    # large, so they are fetched with explicit queries instead.
    department = relationship("Department", foreign_keys=[department_id])
    manager = relationship("User", remote_side=[id], foreign_keys=[manager_id])

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def has_performance_data(self) -> bool:
        return any(
            v is not None
            for v in (
                self.current_performance_rating,
                self.last_review_notes,
                self.last_review_date,
                self.current_goals,
            )
        )

    @property
    def performance_rating_text(self) -> str:
        if self.current_performance_rating is None:
            return "Not Rated"
        return RATING_TEXT.get(self.current_performance_rating, "Invalid Rating")
