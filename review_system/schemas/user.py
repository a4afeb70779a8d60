from datetime import date, datetime
import uuid
from pydantic import EmailStr, Field

from review_system.models.user import Role
from review_system.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Role = Role.EMPLOYEE
    department_id: uuid.UUID | None = None
    manager_id: uuid.UUID | None = None


class UserUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Role | None = None
    active: bool | None = None
    # explicit null removes the user from the department / manager
    department_id: uuid.UUID | None = None
    manager_id: uuid.UUID | None = None


class PerformanceUpdate(CamelModel):
    current_performance_rating: int | None = Field(default=None, ge=1, le=5)
    last_review_notes: str | None = Field(default=None, max_length=2000)
    last_review_date: date | None = None
    current_goals: str | None = Field(default=None, max_length=1000)


class UserDepartmentSummary(CamelModel):
    id: str
    name: str
    organization_name: str


class ManagerSummary(CamelModel):
    id: str
    username: str
    full_name: str
    role: str


class UserOut(CamelModel):
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str
    active: bool
    created_at: datetime
    updated_at: datetime

    current_performance_rating: int | None = None
    current_performance_rating_text: str
    last_review_notes: str | None = None
    last_review_date: date | None = None
    current_goals: str | None = None
    has_performance_data: bool

    department: UserDepartmentSummary | None = None
    manager: ManagerSummary | None = None
    direct_reports_count: int
