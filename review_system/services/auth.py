import logging

from sqlalchemy.orm import Session

from review_system.core.errors import AuthenticationFailure, Conflict
from review_system.core.security import create_access_token, hash_password, verify_password
from review_system.db.session import commit_or_conflict
from review_system.models.user import User
from review_system.repositories import users as user_repo
from review_system.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from review_system.services.users import EMAIL_IN_USE, USERNAME_TAKEN

logger = logging.getLogger(__name__)


def issue_token(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.username, {"role": user.role}),
        id=str(user.id),
        username=user.username,
        email=user.email,
        role=user.role,
    )


def register(db: Session, payload: RegisterRequest) -> AuthResponse:
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
    db.add(user)
    commit_or_conflict(db, "Username or email is already in use!")
    db.refresh(user)

    logger.info("Registered user %s with role %s", user.username, user.role)
    return issue_token(user)


def login(db: Session, payload: LoginRequest) -> AuthResponse:
    user = user_repo.get_by_username(db, payload.username)
    if user is None or not user.active or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.username)
        raise AuthenticationFailure("Invalid credentials")
    return issue_token(user)
