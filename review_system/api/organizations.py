import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from review_system.core.security import get_current_user
from review_system.db.session import get_db
from review_system.models.user import User
from review_system.repositories.paging import PageRequest
from review_system.schemas.common import MessageOut
from review_system.schemas.organization import OrganizationCreate, OrganizationOut, OrganizationUpdate
from review_system.schemas.pagination import PaginatedResponse
from review_system.services import organizations as service

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.get("/test", response_class=PlainTextResponse)
def test_endpoint():
    return "Organization endpoint is working!"


@router.post("", response_model=OrganizationOut, status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_organization(db, current_user, payload)


@router.get("", response_model=PaginatedResponse[OrganizationOut])
def list_organizations(
    page: int = Query(default=0, ge=0, description="0-based page number"),
    size: int = Query(default=10, ge=1, le=500, description="Page size"),
    sort_by: str = Query(default="name", alias="sortBy"),
    sort_dir: str = Query(default="asc", alias="sortDir", description="asc or desc"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    request = PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)
    return service.list_organizations(db, request)


@router.get("/active", response_model=list[OrganizationOut])
def list_active_organizations(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.list_active_organizations(db)


@router.get("/search", response_model=list[OrganizationOut])
def search_organizations(
    name: str = Query(..., min_length=1, description="Case-insensitive substring"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.search_organizations(db, name)


@router.get("/{organization_id}", response_model=OrganizationOut)
def get_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return service.get_organization(db, organization_id)


@router.put("/{organization_id}", response_model=OrganizationOut)
def update_organization(
    organization_id: uuid.UUID,
    payload: OrganizationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.update_organization(db, current_user, organization_id, payload)


@router.patch("/{organization_id}/deactivate", response_model=MessageOut)
def deactivate_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.deactivate_organization(db, current_user, organization_id)
    return MessageOut(message="Organization deactivated successfully")


@router.delete("/{organization_id}", response_model=MessageOut)
def delete_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_organization(db, current_user, organization_id)
    return MessageOut(message="Organization deleted successfully")
