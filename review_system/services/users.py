"""
User service.

Every operation takes the acting user explicitly and checks it against
`review_system.core.policy` before doing anything else. Partial updates use
pydantic's set-field tracking: a field that is absent is left alone, while an
explicit null clears nullable fields (department, manager, performance data).
"""
import logging
import uuid

from sqlalchemy.orm import Session

from review_system.core.errors import AccessDenied, Conflict, NotFound, ValidationFailure
from review_system.core.policy import Operation, authorize, enforce
from review_system.core.security import hash_password
from review_system.db.session import commit_or_conflict
from review_system.models.user import MANAGER_ROLES, User
from review_system.repositories import departments as department_repo
from review_system.repositories import users as user_repo
from review_system.repositories.paging import PageRequest
from review_system.schemas.pagination import PaginatedResponse, PaginationMeta
from review_system.schemas.user import (
    ManagerSummary,
    PerformanceUpdate,
    UserCreate,
    UserDepartmentSummary,
    UserOut,
    UserUpdate,
)

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username is already taken!"
EMAIL_IN_USE = "Email is already in use!"

# Fields a user may change on their own profile
SELF_EDITABLE_FIELDS = frozenset({"username", "email", "first_name", "last_name"})


def to_out(u: User, direct_reports_count: int, detailed: bool = False) -> UserOut:
    out = UserOut(
        id=str(u.id),
        username=u.username,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        full_name=u.full_name,
        role=u.role,
        active=u.active,
        created_at=u.created_at,
        updated_at=u.updated_at,
        current_performance_rating=u.current_performance_rating,
        current_performance_rating_text=u.performance_rating_text,
        last_review_notes=u.last_review_notes,
        last_review_date=u.last_review_date,
        current_goals=u.current_goals,
        has_performance_data=u.has_performance_data,
        direct_reports_count=direct_reports_count,
    )
    if detailed:
        if u.department:
            out.department = UserDepartmentSummary(
                id=str(u.department.id),
                name=u.department.name,
                organization_name=u.department.organization.name,
            )
        if u.manager:
            out.manager = ManagerSummary(
                id=str(u.manager.id),
                username=u.manager.username,
                full_name=u.manager.full_name,
                role=u.manager.role,
            )
    return out


def _many_to_out(db: Session, users: list[User]) -> list[UserOut]:
    counts = user_repo.direct_report_counts(db, [u.id for u in users])
    return [to_out(u, counts.get(u.id, 0)) for u in users]


def _single_to_out(db: Session, user: User, detailed: bool = False) -> UserOut:
    counts = user_repo.direct_report_counts(db, [user.id])
    return to_out(user, counts.get(user.id, 0), detailed=detailed)


def _get_or_404(db: Session, user_id: uuid.UUID) -> User:
    user = user_repo.get(db, user_id)
    if not user:
        raise NotFound(f"User not found with id: {user_id}")
    return user


def _resolve_department_id(db: Session, department_id: uuid.UUID) -> uuid.UUID:
    if not department_repo.get(db, department_id):
        raise NotFound(f"Department not found with id: {department_id}")
    return department_id


def _resolve_manager_id(db: Session, manager_id: uuid.UUID, subject: User | None = None) -> uuid.UUID:
    if subject is not None and subject.id == manager_id:
        raise ValidationFailure("A user cannot be their own manager")
    manager = user_repo.get(db, manager_id)
    if not manager:
        raise NotFound(f"Manager not found with id: {manager_id}")
    if not manager.is_manager:
        raise ValidationFailure(
            f"User with role '{manager.role}' cannot be assigned as a manager"
        )
    return manager.id


def _check_can_lose_manager_role(db: Session, user: User, new_role: str) -> None:
    # Departments and direct reports may only point at qualifying managers.
    if department_repo.list_managed_by(db, user.id) or user_repo.has_direct_reports(db, user.id):
        raise ValidationFailure(
            "User manages departments or employees; "
            f"reassign them before changing role to {new_role}"
        )


def _apply_changes(db: Session, user: User, changes: dict) -> None:
    new_username = changes.get("username")
    if new_username is not None and new_username != user.username:
        if user_repo.username_exists(db, new_username):
            raise Conflict(USERNAME_TAKEN)
        user.username = new_username

    new_email = changes.get("email")
    if new_email is not None and new_email != user.email:
        if user_repo.email_exists(db, new_email):
            raise Conflict(EMAIL_IN_USE)
        user.email = new_email

    for field in ("first_name", "last_name", "active"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])

    if changes.get("role") is not None:
        new_role = changes["role"].value
        if new_role not in MANAGER_ROLES and user.is_manager:
            _check_can_lose_manager_role(db, user, new_role)
        user.role = new_role

    if "department_id" in changes:
        department_id = changes["department_id"]
        user.department_id = _resolve_department_id(db, department_id) if department_id else None

    if "manager_id" in changes:
        manager_id = changes["manager_id"]
        user.manager_id = _resolve_manager_id(db, manager_id, subject=user) if manager_id else None


def create_user(db: Session, actor: User, payload: UserCreate) -> UserOut:
    enforce(Operation.USER_CREATE, actor)

    if user_repo.username_exists(db, payload.username):
        raise Conflict(USERNAME_TAKEN)
    if user_repo.email_exists(db, payload.email):
        raise Conflict(EMAIL_IN_USE)

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role.value,
        active=True,
    )
    if payload.department_id is not None:
        user.department_id = _resolve_department_id(db, payload.department_id)
    if payload.manager_id is not None:
        user.manager_id = _resolve_manager_id(db, payload.manager_id)

    db.add(user)
    commit_or_conflict(db, "Username or email is already in use!")
    db.refresh(user)

    logger.info("User %s (%s) created by %s", user.username, user.role, actor.username)
    return to_out(user, 0)


def list_users(
    db: Session,
    actor: User,
    request: PageRequest,
    *,
    department_id: uuid.UUID | None = None,
    role: str | None = None,
    active: bool | None = None,
) -> PaginatedResponse[UserOut]:
    enforce(Operation.USER_LIST, actor)
    users, total = user_repo.list_page(
        db, request, department_id=department_id, role=role, active=active
    )
    return PaginatedResponse[UserOut](
        items=_many_to_out(db, users),
        pagination=PaginationMeta.build(page=request.page, size=request.size, total=total),
    )


def get_user(db: Session, actor: User, user_id: uuid.UUID) -> UserOut:
    target = user_repo.get(db, user_id)
    # Checked before the existence test so a denial looks the same either way.
    if not authorize(Operation.USER_VIEW, actor, target):
        raise AccessDenied()
    if target is None:
        raise NotFound(f"User not found with id: {user_id}")
    return _single_to_out(db, target, detailed=True)


def get_own_profile(db: Session, actor: User) -> UserOut:
    return _single_to_out(db, actor, detailed=True)


def update_user(db: Session, actor: User, user_id: uuid.UUID, payload: UserUpdate) -> UserOut:
    enforce(Operation.USER_UPDATE, actor)
    user = _get_or_404(db, user_id)

    _apply_changes(db, user, payload.model_dump(exclude_unset=True))
    commit_or_conflict(db, "Username or email is already in use!")
    db.refresh(user)

    logger.info("User %s updated by %s", user.username, actor.username)
    return _single_to_out(db, user)


def update_own_profile(db: Session, actor: User, payload: UserUpdate) -> UserOut:
    enforce(Operation.USER_UPDATE_SELF, actor, actor)

    changes = payload.model_dump(exclude_unset=True)
    dropped = sorted(set(changes) - SELF_EDITABLE_FIELDS)
    if dropped:
        logger.info("Ignoring restricted fields %s on self-update by %s", dropped, actor.username)
    allowed = {k: v for k, v in changes.items() if k in SELF_EDITABLE_FIELDS}

    _apply_changes(db, actor, allowed)
    commit_or_conflict(db, "Username or email is already in use!")
    db.refresh(actor)
    return _single_to_out(db, actor)


def update_performance(
    db: Session, actor: User, user_id: uuid.UUID, payload: PerformanceUpdate
) -> UserOut:
    target = user_repo.get(db, user_id)
    enforce(Operation.USER_UPDATE_PERFORMANCE, actor, target)
    if target is None:
        raise NotFound(f"User not found with id: {user_id}")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(target, field, value)

    db.commit()
    db.refresh(target)
    logger.info("Performance data for %s updated by %s", target.username, actor.username)
    return _single_to_out(db, target, detailed=True)


def list_department_users(db: Session, actor: User) -> list[UserOut]:
    enforce(Operation.USER_LIST_DEPARTMENT, actor)

    if actor.is_admin:
        return _many_to_out(db, user_repo.list_all(db))

    managed = department_repo.list_managed_by(db, actor.id)
    if not managed:
        return []
    return _many_to_out(db, user_repo.list_in_departments(db, [d.id for d in managed]))


def list_direct_reports(db: Session, actor: User) -> list[UserOut]:
    enforce(Operation.USER_LIST_REPORTS, actor)
    return _many_to_out(db, user_repo.list_direct_reports(db, actor.id))


def list_team_performance(db: Session, actor: User) -> list[UserOut]:
    """Direct reports with their performance fields, for review planning."""
    enforce(Operation.USER_VIEW_TEAM_PERFORMANCE, actor)
    reports = user_repo.list_direct_reports(db, actor.id)
    counts = user_repo.direct_report_counts(db, [u.id for u in reports])
    return [to_out(u, counts.get(u.id, 0), detailed=True) for u in reports]


def deactivate_user(db: Session, actor: User, user_id: uuid.UUID) -> None:
    enforce(Operation.USER_DEACTIVATE, actor)
    user = _get_or_404(db, user_id)
    user.active = False
    db.commit()
    logger.info("User %s deactivated by %s", user.username, actor.username)


def delete_user(db: Session, actor: User, user_id: uuid.UUID) -> None:
    enforce(Operation.USER_DELETE, actor)
    user = _get_or_404(db, user_id)

    if user_repo.has_direct_reports(db, user.id):
        logger.warning("Refused to delete user %s: has direct reports", user.username)
        raise Conflict(
            "Cannot delete user who manages other employees. "
            "Please reassign direct reports first."
        )

    db.delete(user)
    db.commit()
    logger.info("User %s deleted by %s", user.username, actor.username)
