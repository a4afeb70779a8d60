import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from review_system.models.department import Department
from review_system.models.organization import Organization
from review_system.repositories.paging import PageRequest, paginate

SORTABLE = {
    "name": Organization.name,
    "createdAt": Organization.created_at,
    "updatedAt": Organization.updated_at,
    "active": Organization.active,
}


def get(db: Session, organization_id: uuid.UUID) -> Organization | None:
    return db.get(Organization, organization_id)


def name_exists(db: Session, name: str) -> bool:
    # Case-sensitive on purpose: "Acme" and "acme" are different organizations.
    return db.query(Organization.id).filter(Organization.name == name).first() is not None


def list_page(db: Session, request: PageRequest) -> tuple[list[Organization], int]:
    return paginate(db.query(Organization), request, SORTABLE)


def list_active(db: Session) -> list[Organization]:
    return (
        db.query(Organization)
        .filter(Organization.active.is_(True))
        .order_by(Organization.name.asc())
        .all()
    )


def search_by_name(db: Session, name: str) -> list[Organization]:
    return (
        db.query(Organization)
        .filter(Organization.name.icontains(name, autoescape=True))
        .order_by(Organization.name.asc())
        .all()
    )


def department_counts(db: Session, organization_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not organization_ids:
        return {}
    rows = (
        db.query(Department.organization_id, func.count(Department.id))
        .filter(Department.organization_id.in_(organization_ids))
        .group_by(Department.organization_id)
        .all()
    )
    return {org_id: count for org_id, count in rows}


def has_departments(db: Session, organization_id: uuid.UUID) -> bool:
    return (
        db.query(Department.id).filter(Department.organization_id == organization_id).first()
        is not None
    )
