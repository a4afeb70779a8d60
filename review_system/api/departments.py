import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from review_system.core.security import get_current_user
from review_system.db.session import get_db
from review_system.models.user import User
from review_system.repositories.paging import PageRequest
from review_system.schemas.common import MessageOut
from review_system.schemas.department import DepartmentCreate, DepartmentOut, DepartmentUpdate
from review_system.schemas.pagination import PaginatedResponse
from review_system.services import departments as service

router = APIRouter(prefix="/api/departments", tags=["departments"])


@router.get("/test", response_class=PlainTextResponse)
def test_endpoint():
    return "Department endpoint is working!"


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(
    payload: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_department(db, current_user, payload)


@router.get("", response_model=PaginatedResponse[DepartmentOut])
def list_departments(
    page: int = Query(default=0, ge=0, description="0-based page number"),
    size: int = Query(default=10, ge=1, le=500, description="Page size"),
    sort_by: str = Query(default="name", alias="sortBy"),
    sort_dir: str = Query(default="asc", alias="sortDir", description="asc or desc"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    request = PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)
    return service.list_departments(db, request)


@router.get("/active", response_model=list[DepartmentOut])
def list_active_departments(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.list_active_departments(db)


@router.get("/search", response_model=list[DepartmentOut])
def search_departments(
    name: str = Query(..., min_length=1, description="Case-insensitive substring"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.search_departments(db, name)


@router.get("/organization/{organization_id}", response_model=list[DepartmentOut])
def list_organization_departments(
    organization_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.list_organization_departments(db, organization_id)


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.get_department(db, department_id)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: uuid.UUID,
    payload: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.update_department(db, current_user, department_id, payload)


@router.patch("/{department_id}/remove-manager", response_model=DepartmentOut)
def remove_manager(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.remove_manager(db, current_user, department_id)


@router.patch("/{department_id}/deactivate", response_model=MessageOut)
def deactivate_department(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.deactivate_department(db, current_user, department_id)
    return MessageOut(message="Department deactivated successfully")


@router.delete("/{department_id}", response_model=MessageOut)
def delete_department(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_department(db, current_user, department_id)
    return MessageOut(message="Department deleted successfully")
