from sqlalchemy.orm import Session

from review_system.core.security import create_access_token, hash_password
from review_system.models.department import Department
from review_system.models.organization import Organization
from review_system.models.user import User

DEFAULT_PASSWORD = "password123"


def create_user(
    db: Session,
    username: str,
    role: str = "EMPLOYEE",
    *,
    email: str | None = None,
    first_name: str = "Test",
    last_name: str = "User",
    department: Department | None = None,
    manager: User | None = None,
    active: bool = True,
    password: str = DEFAULT_PASSWORD,
) -> User:
    u = User(
        username=username,
        email=email or f"{username}@test.com",
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        active=active,
        department_id=department.id if department else None,
        manager_id=manager.id if manager else None,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_organization(db: Session, name: str = "Acme", description: str | None = None) -> Organization:
    o = Organization(name=name, description=description, active=True)
    db.add(o)
    db.commit()
    db.refresh(o)
    return o


def create_department(
    db: Session,
    organization: Organization,
    name: str = "Engineering",
    manager: User | None = None,
) -> Department:
    d = Department(
        name=name,
        organization_id=organization.id,
        manager_id=manager.id if manager else None,
        active=True,
    )
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.username, {"role": user.role})
    return {"Authorization": f"Bearer {token}"}
