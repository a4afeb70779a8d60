import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from review_system.models.user import User
from review_system.repositories.paging import PageRequest, paginate

SORTABLE = {
    "lastName": User.last_name,
    "firstName": User.first_name,
    "username": User.username,
    "email": User.email,
    "role": User.role,
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
}


def get(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)


def get_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).one_or_none()


def username_exists(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def email_exists(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


def list_page(
    db: Session,
    request: PageRequest,
    *,
    department_id: uuid.UUID | None = None,
    role: str | None = None,
    active: bool | None = None,
) -> tuple[list[User], int]:
    query = db.query(User)
    if department_id is not None:
        query = query.filter(User.department_id == department_id)
    if role is not None:
        query = query.filter(User.role == role)
    if active is not None:
        query = query.filter(User.active.is_(active))
    return paginate(query, request, SORTABLE)


def list_all(db: Session) -> list[User]:
    return db.query(User).order_by(User.last_name.asc(), User.first_name.asc()).all()


def list_by_department(db: Session, department_id: uuid.UUID) -> list[User]:
    return (
        db.query(User)
        .filter(User.department_id == department_id)
        .order_by(User.last_name.asc(), User.first_name.asc())
        .all()
    )


def list_in_departments(db: Session, department_ids: list[uuid.UUID]) -> list[User]:
    if not department_ids:
        return []
    return (
        db.query(User)
        .filter(User.department_id.in_(department_ids))
        .distinct()
        .order_by(User.last_name.asc(), User.first_name.asc())
        .all()
    )


def list_direct_reports(db: Session, manager_id: uuid.UUID) -> list[User]:
    return (
        db.query(User)
        .filter(User.manager_id == manager_id)
        .order_by(User.last_name.asc(), User.first_name.asc())
        .all()
    )


def has_direct_reports(db: Session, user_id: uuid.UUID) -> bool:
    return db.query(User.id).filter(User.manager_id == user_id).first() is not None


def direct_report_counts(db: Session, user_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not user_ids:
        return {}
    rows = (
        db.query(User.manager_id, func.count(User.id))
        .filter(User.manager_id.in_(user_ids))
        .group_by(User.manager_id)
        .all()
    )
    return {manager_id: count for manager_id, count in rows}
