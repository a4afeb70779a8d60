from datetime import datetime
import uuid
from pydantic import Field

from review_system.schemas.common import CamelModel


class DepartmentCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    organization_id: uuid.UUID
    manager_id: uuid.UUID | None = None


class DepartmentUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    active: bool | None = None
    # explicit null clears the manager, omitting it leaves the manager alone
    manager_id: uuid.UUID | None = None


class OrganizationSummary(CamelModel):
    id: str
    name: str


class DepartmentUserSummary(CamelModel):
    id: str
    username: str
    first_name: str
    last_name: str
    full_name: str
    role: str
    active: bool


class DepartmentOut(CamelModel):
    id: str
    name: str
    description: str | None
    active: bool
    created_at: datetime
    updated_at: datetime
    organization: OrganizationSummary
    manager: DepartmentUserSummary | None = None
    user_count: int
    users: list[DepartmentUserSummary] | None = None
