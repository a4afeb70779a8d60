import uuid

import pytest

from review_system.core import policy
from review_system.core.errors import AccessDenied
from review_system.core.policy import Operation, authorize, enforce
from review_system.models.user import User


def _user(role: str = "EMPLOYEE", manager: User | None = None) -> User:
    return User(
        id=uuid.uuid4(),
        username=f"u-{uuid.uuid4().hex[:8]}",
        email="x@test.com",
        password_hash="x",
        first_name="Test",
        last_name="User",
        role=role,
        active=True,
        manager_id=manager.id if manager else None,
    )


@pytest.mark.parametrize(
    "operation, allowed",
    [
        (Operation.USER_CREATE, {"HR_ADMIN", "SYSTEM_ADMIN"}),
        (Operation.USER_LIST, {"HR_ADMIN", "SYSTEM_ADMIN"}),
        (Operation.USER_UPDATE, {"HR_ADMIN", "SYSTEM_ADMIN"}),
        (Operation.USER_DEACTIVATE, {"SYSTEM_ADMIN"}),
        (Operation.USER_DELETE, {"SYSTEM_ADMIN"}),
        (Operation.USER_LIST_REPORTS, {"MANAGER", "HR_ADMIN", "SYSTEM_ADMIN"}),
        (Operation.USER_LIST_DEPARTMENT, {"MANAGER", "HR_ADMIN", "SYSTEM_ADMIN"}),
        (Operation.USER_VIEW_TEAM_PERFORMANCE, {"MANAGER", "HR_ADMIN", "SYSTEM_ADMIN"}),
    ],
)
def test_role_only_operations(operation, allowed):
    for role in ("EMPLOYEE", "MANAGER", "HR_ADMIN", "SYSTEM_ADMIN"):
        assert authorize(operation, _user(role)) is (role in allowed), role


def test_view_user():
    manager = _user("MANAGER")
    report = _user(manager=manager)
    peer = _user()

    assert authorize(Operation.USER_VIEW, report, report)
    assert authorize(Operation.USER_VIEW, manager, report)
    assert authorize(Operation.USER_VIEW, _user("HR_ADMIN"), report)
    assert authorize(Operation.USER_VIEW, _user("SYSTEM_ADMIN"), report)
    assert not authorize(Operation.USER_VIEW, peer, report)
    assert not authorize(Operation.USER_VIEW, report, manager)


def test_view_is_one_level_only():
    top = _user("MANAGER")
    middle = _user("MANAGER", manager=top)
    bottom = _user(manager=middle)
    assert authorize(Operation.USER_VIEW, middle, bottom)
    assert not authorize(Operation.USER_VIEW, top, bottom)


def test_view_missing_target_only_for_admins():
    assert not authorize(Operation.USER_VIEW, _user("MANAGER"), None)
    assert authorize(Operation.USER_VIEW, _user("HR_ADMIN"), None)


def test_update_self_requires_same_user():
    me = _user()
    assert authorize(Operation.USER_UPDATE_SELF, me, me)
    assert not authorize(Operation.USER_UPDATE_SELF, _user("SYSTEM_ADMIN"), me)


def test_update_performance():
    manager = _user("MANAGER")
    report = _user(manager=manager)
    assert authorize(Operation.USER_UPDATE_PERFORMANCE, manager, report)
    assert authorize(Operation.USER_UPDATE_PERFORMANCE, _user("HR_ADMIN"), report)
    assert not authorize(Operation.USER_UPDATE_PERFORMANCE, _user("MANAGER"), report)
    assert not authorize(Operation.USER_UPDATE_PERFORMANCE, report, report)


def test_structure_mutations_follow_setting(monkeypatch):
    employee = _user()
    admin = _user("HR_ADMIN")
    for operation in (Operation.ORGANIZATION_MUTATE, Operation.DEPARTMENT_MUTATE):
        assert authorize(operation, employee)

    monkeypatch.setattr(policy.settings, "RESTRICT_STRUCTURE_MUTATIONS", True)
    for operation in (Operation.ORGANIZATION_MUTATE, Operation.DEPARTMENT_MUTATE):
        assert not authorize(operation, employee)
        assert authorize(operation, admin)


def test_enforce_raises_access_denied():
    with pytest.raises(AccessDenied) as exc_info:
        enforce(Operation.USER_DELETE, _user("HR_ADMIN"))
    assert exc_info.value.status_code == 403
    enforce(Operation.USER_DELETE, _user("SYSTEM_ADMIN"))
