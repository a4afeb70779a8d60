import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from review_system.models.department import Department
from review_system.models.user import User
from review_system.repositories.paging import PageRequest, paginate

SORTABLE = {
    "name": Department.name,
    "createdAt": Department.created_at,
    "updatedAt": Department.updated_at,
    "active": Department.active,
}


def get(db: Session, department_id: uuid.UUID) -> Department | None:
    return db.get(Department, department_id)


def name_exists_in_organization(db: Session, name: str, organization_id: uuid.UUID) -> bool:
    return (
        db.query(Department.id)
        .filter(Department.name == name, Department.organization_id == organization_id)
        .first()
        is not None
    )


def list_page(db: Session, request: PageRequest) -> tuple[list[Department], int]:
    return paginate(db.query(Department), request, SORTABLE)


def list_by_organization(db: Session, organization_id: uuid.UUID) -> list[Department]:
    return (
        db.query(Department)
        .filter(Department.organization_id == organization_id)
        .order_by(Department.name.asc())
        .all()
    )


def list_active(db: Session) -> list[Department]:
    return (
        db.query(Department)
        .filter(Department.active.is_(True))
        .order_by(Department.name.asc())
        .all()
    )


def search_by_name(db: Session, name: str) -> list[Department]:
    return (
        db.query(Department)
        .filter(Department.name.icontains(name, autoescape=True))
        .order_by(Department.name.asc())
        .all()
    )


def list_managed_by(db: Session, manager_id: uuid.UUID) -> list[Department]:
    return db.query(Department).filter(Department.manager_id == manager_id).all()


def user_counts(db: Session, department_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not department_ids:
        return {}
    rows = (
        db.query(User.department_id, func.count(User.id))
        .filter(User.department_id.in_(department_ids))
        .group_by(User.department_id)
        .all()
    )
    return {dept_id: count for dept_id, count in rows}


def has_users(db: Session, department_id: uuid.UUID) -> bool:
    return db.query(User.id).filter(User.department_id == department_id).first() is not None
