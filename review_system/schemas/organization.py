from datetime import datetime
from pydantic import Field

from review_system.schemas.common import CamelModel


class OrganizationCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class OrganizationUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    active: bool | None = None


class DepartmentSummary(CamelModel):
    id: str
    name: str
    active: bool
    user_count: int
    manager_name: str | None = None


class OrganizationOut(CamelModel):
    id: str
    name: str
    description: str | None
    active: bool
    created_at: datetime
    updated_at: datetime
    department_count: int
    departments: list[DepartmentSummary] | None = None
