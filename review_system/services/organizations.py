"""
Organization service.

Read operations are open to any authenticated caller; writes go through
`Operation.ORGANIZATION_MUTATE`.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from review_system.core.errors import Conflict, NotFound
from review_system.core.policy import Operation, enforce
from review_system.db.session import commit_or_conflict
from review_system.models.organization import Organization
from review_system.models.user import User
from review_system.repositories import departments as department_repo
from review_system.repositories import organizations as organization_repo
from review_system.repositories.paging import PageRequest
from review_system.schemas.organization import (
    DepartmentSummary,
    OrganizationCreate,
    OrganizationOut,
    OrganizationUpdate,
)
from review_system.schemas.pagination import PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)


def _duplicate_name(name: str) -> str:
    return f"Organization with name '{name}' already exists"


def to_out(o: Organization, department_count: int) -> OrganizationOut:
    return OrganizationOut(
        id=str(o.id),
        name=o.name,
        description=o.description,
        active=o.active,
        created_at=o.created_at,
        updated_at=o.updated_at,
        department_count=department_count,
    )


def _many_to_out(db: Session, orgs: list[Organization]) -> list[OrganizationOut]:
    counts = organization_repo.department_counts(db, [o.id for o in orgs])
    return [to_out(o, counts.get(o.id, 0)) for o in orgs]


def _get_or_404(db: Session, organization_id: uuid.UUID) -> Organization:
    org = organization_repo.get(db, organization_id)
    if not org:
        raise NotFound(f"Organization not found with id: {organization_id}")
    return org


def create_organization(db: Session, actor: User, payload: OrganizationCreate) -> OrganizationOut:
    enforce(Operation.ORGANIZATION_MUTATE, actor)

    if organization_repo.name_exists(db, payload.name):
        raise Conflict(_duplicate_name(payload.name))

    org = Organization(name=payload.name, description=payload.description, active=True)
    db.add(org)
    commit_or_conflict(db, _duplicate_name(payload.name))
    db.refresh(org)

    logger.info("Organization %s created by %s", org.id, actor.username)
    return to_out(org, 0)


def get_organization(db: Session, organization_id: uuid.UUID) -> OrganizationOut:
    org = _get_or_404(db, organization_id)
    departments = department_repo.list_by_organization(db, org.id)
    user_counts = department_repo.user_counts(db, [d.id for d in departments])

    out = to_out(org, len(departments))
    if departments:
        out.departments = [
            DepartmentSummary(
                id=str(d.id),
                name=d.name,
                active=d.active,
                user_count=user_counts.get(d.id, 0),
                manager_name=d.manager.full_name if d.manager else None,
            )
            for d in departments
        ]
    return out


def list_organizations(db: Session, request: PageRequest) -> PaginatedResponse[OrganizationOut]:
    orgs, total = organization_repo.list_page(db, request)
    return PaginatedResponse[OrganizationOut](
        items=_many_to_out(db, orgs),
        pagination=PaginationMeta.build(page=request.page, size=request.size, total=total),
    )


def list_active_organizations(db: Session) -> list[OrganizationOut]:
    return _many_to_out(db, organization_repo.list_active(db))


def search_organizations(db: Session, name: str) -> list[OrganizationOut]:
    return _many_to_out(db, organization_repo.search_by_name(db, name))


def update_organization(
    db: Session, actor: User, organization_id: uuid.UUID, payload: OrganizationUpdate
) -> OrganizationOut:
    enforce(Operation.ORGANIZATION_MUTATE, actor)
    org = _get_or_404(db, organization_id)
    changes = payload.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name is not None and new_name != org.name:
        if organization_repo.name_exists(db, new_name):
            raise Conflict(_duplicate_name(new_name))
        org.name = new_name

    if "description" in changes:
        org.description = changes["description"]

    if changes.get("active") is not None:
        org.active = changes["active"]

    commit_or_conflict(db, _duplicate_name(org.name))
    db.refresh(org)

    logger.info("Organization %s updated by %s", org.id, actor.username)
    counts = organization_repo.department_counts(db, [org.id])
    return to_out(org, counts.get(org.id, 0))


def deactivate_organization(db: Session, actor: User, organization_id: uuid.UUID) -> None:
    enforce(Operation.ORGANIZATION_MUTATE, actor)
    org = _get_or_404(db, organization_id)
    org.active = False
    db.commit()
    logger.info("Organization %s deactivated by %s", org.id, actor.username)


def delete_organization(db: Session, actor: User, organization_id: uuid.UUID) -> None:
    enforce(Operation.ORGANIZATION_MUTATE, actor)
    org = _get_or_404(db, organization_id)

    if organization_repo.has_departments(db, org.id):
        logger.warning("Refused to delete organization %s: departments exist", org.id)
        raise Conflict(
            "Cannot delete organization with existing departments. "
            "Please remove all departments first or use deactivate instead."
        )

    db.delete(org)
    db.commit()
    logger.info("Organization %s deleted by %s", organization_id, actor.username)
