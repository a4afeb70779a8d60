import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from review_system.core.security import get_current_user
from review_system.db.session import get_db
from review_system.models.user import Role, User
from review_system.repositories.paging import PageRequest
from review_system.schemas.common import MessageOut
from review_system.schemas.pagination import PaginatedResponse
from review_system.schemas.user import PerformanceUpdate, UserCreate, UserOut, UserUpdate
from review_system.services import users as service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/test", response_class=PlainTextResponse)
def test_endpoint():
    return "User endpoint is working!"


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_user(db, current_user, payload)


@router.get("", response_model=PaginatedResponse[UserOut])
def list_users(
    page: int = Query(default=0, ge=0, description="0-based page number"),
    size: int = Query(default=10, ge=1, le=500, description="Page size"),
    sort_by: str = Query(default="lastName", alias="sortBy"),
    sort_dir: str = Query(default="asc", alias="sortDir", description="asc or desc"),
    department_id: uuid.UUID | None = Query(default=None, alias="departmentId"),
    role: Role | None = Query(default=None),
    active: bool | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    request = PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)
    return service.list_users(
        db,
        current_user,
        request,
        department_id=department_id,
        role=role.value if role else None,
        active=active,
    )


@router.get("/me", response_model=UserOut)
def get_own_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_own_profile(db, current_user)


@router.put("/me", response_model=UserOut)
def update_own_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.update_own_profile(db, current_user, payload)


@router.get("/my-department", response_model=list[UserOut])
def list_my_department_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.list_department_users(db, current_user)


@router.get("/my-reports", response_model=list[UserOut])
def list_my_direct_reports(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.list_direct_reports(db, current_user)


@router.get("/team-performance", response_model=list[UserOut])
def list_team_performance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.list_team_performance(db, current_user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_user(db, current_user, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.update_user(db, current_user, user_id, payload)


@router.put("/{user_id}/performance", response_model=UserOut)
@router.patch("/{user_id}/performance", response_model=UserOut)
def update_performance(
    user_id: uuid.UUID,
    payload: PerformanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.update_performance(db, current_user, user_id, payload)


@router.patch("/{user_id}/deactivate", response_model=MessageOut)
def deactivate_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.deactivate_user(db, current_user, user_id)
    return MessageOut(message="User deactivated successfully")


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_user(db, current_user, user_id)
    return MessageOut(message="User deleted successfully")
