"""
Access rules for every service operation.

`authorize()` is a pure predicate over the caller, the operation and (where it
matters) the target user, so each rule can be checked without HTTP. Services
call `enforce()` before touching the database for writes.
"""
import enum
import logging

from review_system.core.config import settings
from review_system.core.errors import AccessDenied
from review_system.models.user import ADMIN_ROLES, MANAGER_ROLES, Role, User

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    USER_CREATE = "user:create"
    USER_LIST = "user:list"
    USER_VIEW = "user:view"
    USER_UPDATE = "user:update"
    USER_UPDATE_SELF = "user:update-self"
    USER_UPDATE_PERFORMANCE = "user:update-performance"
    USER_DEACTIVATE = "user:deactivate"
    USER_DELETE = "user:delete"
    USER_LIST_REPORTS = "user:list-reports"
    USER_LIST_DEPARTMENT = "user:list-department"
    USER_VIEW_TEAM_PERFORMANCE = "user:view-team-performance"
    ORGANIZATION_MUTATE = "organization:mutate"
    DEPARTMENT_MUTATE = "department:mutate"


_ROLE_RULES: dict[Operation, frozenset[str]] = {
    Operation.USER_CREATE: ADMIN_ROLES,
    Operation.USER_LIST: ADMIN_ROLES,
    Operation.USER_UPDATE: ADMIN_ROLES,
    Operation.USER_DEACTIVATE: frozenset({Role.SYSTEM_ADMIN.value}),
    Operation.USER_DELETE: frozenset({Role.SYSTEM_ADMIN.value}),
    Operation.USER_LIST_REPORTS: MANAGER_ROLES,
    Operation.USER_LIST_DEPARTMENT: MANAGER_ROLES,
    Operation.USER_VIEW_TEAM_PERFORMANCE: MANAGER_ROLES,
}


def is_direct_manager(caller: User, target: User | None) -> bool:
    # One level only; the management chain is not walked.
    return target is not None and target.manager_id is not None and target.manager_id == caller.id


def authorize(operation: Operation, caller: User, target: User | None = None) -> bool:
    if operation in _ROLE_RULES:
        return caller.role in _ROLE_RULES[operation]

    if operation is Operation.USER_VIEW:
        return (
            (target is not None and target.id == caller.id)
            or is_direct_manager(caller, target)
            or caller.role in ADMIN_ROLES
        )

    if operation is Operation.USER_UPDATE_SELF:
        return target is not None and target.id == caller.id

    if operation is Operation.USER_UPDATE_PERFORMANCE:
        return caller.role in ADMIN_ROLES or is_direct_manager(caller, target)

    if operation in (Operation.ORGANIZATION_MUTATE, Operation.DEPARTMENT_MUTATE):
        if settings.RESTRICT_STRUCTURE_MUTATIONS:
            return caller.role in ADMIN_ROLES
        return True

    return False


def enforce(operation: Operation, caller: User, target: User | None = None) -> None:
    if not authorize(operation, caller, target):
        logger.warning(
            "Denied %s for user %s (role %s)", operation.value, caller.username, caller.role
        )
        raise AccessDenied()
