import logging
import uuid

from sqlalchemy.orm import Session

from review_system.core.errors import Conflict, NotFound, ValidationFailure
from review_system.core.policy import Operation, enforce
from review_system.db.session import commit_or_conflict
from review_system.models.department import Department
from review_system.models.user import User
from review_system.repositories import departments as department_repo
from review_system.repositories import organizations as organization_repo
from review_system.repositories import users as user_repo
from review_system.repositories.paging import PageRequest
from review_system.schemas.department import (
    DepartmentCreate,
    DepartmentOut,
    DepartmentUpdate,
    DepartmentUserSummary,
    OrganizationSummary,
)
from review_system.schemas.pagination import PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)


def _duplicate_name(name: str) -> str:
    return f"Department with name '{name}' already exists in this organization"


def user_summary(u: User) -> DepartmentUserSummary:
    return DepartmentUserSummary(
        id=str(u.id),
        username=u.username,
        first_name=u.first_name,
        last_name=u.last_name,
        full_name=u.full_name,
        role=u.role,
        active=u.active,
    )


def to_out(d: Department, user_count: int) -> DepartmentOut:
    return DepartmentOut(
        id=str(d.id),
        name=d.name,
        description=d.description,
        active=d.active,
        created_at=d.created_at,
        updated_at=d.updated_at,
        organization=OrganizationSummary(id=str(d.organization.id), name=d.organization.name),
        manager=user_summary(d.manager) if d.manager else None,
        user_count=user_count,
    )


def _many_to_out(db: Session, departments: list[Department]) -> list[DepartmentOut]:
    counts = department_repo.user_counts(db, [d.id for d in departments])
    return [to_out(d, counts.get(d.id, 0)) for d in departments]


def _get_or_404(db: Session, department_id: uuid.UUID) -> Department:
    dept = department_repo.get(db, department_id)
    if not dept:
        raise NotFound(f"Department not found with id: {department_id}")
    return dept


def _qualified_manager(db: Session, manager_id: uuid.UUID) -> User:
    manager = user_repo.get(db, manager_id)
    if not manager:
        raise NotFound(f"Manager not found with id: {manager_id}")
    if not manager.is_manager:
        raise ValidationFailure(
            f"User with role '{manager.role}' cannot be assigned as department manager"
        )
    return manager


def create_department(db: Session, actor: User, payload: DepartmentCreate) -> DepartmentOut:
    enforce(Operation.DEPARTMENT_MUTATE, actor)

    org = organization_repo.get(db, payload.organization_id)
    if not org:
        raise NotFound(f"Organization not found with id: {payload.organization_id}")

    if department_repo.name_exists_in_organization(db, payload.name, org.id):
        raise Conflict(_duplicate_name(payload.name))

    dept = Department(
        name=payload.name,
        description=payload.description,
        organization_id=org.id,
        active=True,
    )
    if payload.manager_id is not None:
        dept.manager_id = _qualified_manager(db, payload.manager_id).id

    db.add(dept)
    commit_or_conflict(db, _duplicate_name(payload.name))
    db.refresh(dept)

    logger.info("Department %s created in organization %s by %s", dept.id, org.id, actor.username)
    return to_out(dept, 0)


def get_department(db: Session, department_id: uuid.UUID) -> DepartmentOut:
    dept = _get_or_404(db, department_id)
    members = user_repo.list_by_department(db, dept.id)
    out = to_out(dept, len(members))
    if members:
        out.users = [user_summary(u) for u in members]
    return out


def list_departments(db: Session, request: PageRequest) -> PaginatedResponse[DepartmentOut]:
    departments, total = department_repo.list_page(db, request)
    return PaginatedResponse[DepartmentOut](
        items=_many_to_out(db, departments),
        pagination=PaginationMeta.build(page=request.page, size=request.size, total=total),
    )


def list_organization_departments(db: Session, organization_id: uuid.UUID) -> list[DepartmentOut]:
    if not organization_repo.get(db, organization_id):
        raise NotFound(f"Organization not found with id: {organization_id}")
    return _many_to_out(db, department_repo.list_by_organization(db, organization_id))


def list_active_departments(db: Session) -> list[DepartmentOut]:
    return _many_to_out(db, department_repo.list_active(db))


def search_departments(db: Session, name: str) -> list[DepartmentOut]:
    return _many_to_out(db, department_repo.search_by_name(db, name))


def update_department(
    db: Session, actor: User, department_id: uuid.UUID, payload: DepartmentUpdate
) -> DepartmentOut:
    enforce(Operation.DEPARTMENT_MUTATE, actor)
    dept = _get_or_404(db, department_id)
    changes = payload.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name is not None and new_name != dept.name:
        if department_repo.name_exists_in_organization(db, new_name, dept.organization_id):
            raise Conflict(_duplicate_name(new_name))
        dept.name = new_name

    if "description" in changes:
        dept.description = changes["description"]

    if changes.get("active") is not None:
        dept.active = changes["active"]

    if "manager_id" in changes:
        manager_id = changes["manager_id"]
        if manager_id is None:
            dept.manager_id = None
        else:
            dept.manager_id = _qualified_manager(db, manager_id).id

    commit_or_conflict(db, _duplicate_name(dept.name))
    db.refresh(dept)

    logger.info("Department %s updated by %s", dept.id, actor.username)
    counts = department_repo.user_counts(db, [dept.id])
    return to_out(dept, counts.get(dept.id, 0))


def remove_manager(db: Session, actor: User, department_id: uuid.UUID) -> DepartmentOut:
    enforce(Operation.DEPARTMENT_MUTATE, actor)
    dept = _get_or_404(db, department_id)
    dept.manager_id = None
    db.commit()
    db.refresh(dept)

    logger.info("Manager removed from department %s by %s", dept.id, actor.username)
    counts = department_repo.user_counts(db, [dept.id])
    return to_out(dept, counts.get(dept.id, 0))


def deactivate_department(db: Session, actor: User, department_id: uuid.UUID) -> None:
    enforce(Operation.DEPARTMENT_MUTATE, actor)
    dept = _get_or_404(db, department_id)
    dept.active = False
    db.commit()
    logger.info("Department %s deactivated by %s", dept.id, actor.username)


def delete_department(db: Session, actor: User, department_id: uuid.UUID) -> None:
    enforce(Operation.DEPARTMENT_MUTATE, actor)
    dept = _get_or_404(db, department_id)

    if department_repo.has_users(db, dept.id):
        logger.warning("Refused to delete department %s: users assigned", dept.id)
        raise Conflict(
            "Cannot delete department with assigned users. "
            "Please reassign users first or use deactivate instead."
        )

    db.delete(dept)
    db.commit()
    logger.info("Department %s deleted by %s", department_id, actor.username)
