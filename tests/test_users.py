import uuid

from fastapi.testclient import TestClient

from review_system.main import app
from tests.helpers import auth_headers, create_department, create_organization, create_user


def _create_body(**overrides):
    body = {
        "username": "newbie",
        "email": "newbie@test.com",
        "password": "secret123",
        "firstName": "New",
        "lastName": "Bie",
        "role": "EMPLOYEE",
    }
    body.update(overrides)
    return body


def test_create_user_requires_admin(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    client = TestClient(app)
    r = client.post("/api/users", json=_create_body(), headers=auth_headers(manager))
    assert r.status_code == 403
    assert r.json()["message"] == "You don't have permission to access this resource"


def test_create_then_get_round_trip(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    manager = create_user(db_session, "boss", role="MANAGER", first_name="Bo", last_name="Ss")
    org = create_organization(db_session, "Acme")
    dept = create_department(db_session, org, "Engineering")

    client = TestClient(app)
    headers = auth_headers(admin)
    r = client.post(
        "/api/users",
        json=_create_body(role="MANAGER", departmentId=str(dept.id), managerId=str(manager.id)),
        headers=headers,
    )
    assert r.status_code == 201
    created = r.json()
    assert "password" not in created

    r = client.get(f"/api/users/{created['id']}", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "MANAGER"
    assert body["fullName"] == "New Bie"
    assert body["department"] == {
        "id": str(dept.id),
        "name": "Engineering",
        "organizationName": "Acme",
    }
    assert body["manager"] == {
        "id": str(manager.id),
        "username": "boss",
        "fullName": "Bo Ss",
        "role": "MANAGER",
    }
    assert body["currentPerformanceRatingText"] == "Not Rated"
    assert body["hasPerformanceData"] is False


def test_get_user_without_department_or_manager(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    loner = create_user(db_session, "loner")
    client = TestClient(app)
    body = client.get(f"/api/users/{loner.id}", headers=auth_headers(admin)).json()
    assert body["department"] is None
    assert body["manager"] is None


def test_create_user_duplicates_conflict(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    create_user(db_session, "newbie", email="first@test.com")
    client = TestClient(app)

    r = client.post("/api/users", json=_create_body(), headers=auth_headers(admin))
    assert r.status_code == 409
    assert r.json()["message"] == "Username is already taken!"

    r = client.post(
        "/api/users",
        json=_create_body(username="other", email="first@test.com"),
        headers=auth_headers(admin),
    )
    assert r.status_code == 409
    assert r.json()["message"] == "Email is already in use!"


def test_create_user_with_non_manager_as_manager(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    employee = create_user(db_session, "emp")
    client = TestClient(app)
    r = client.post(
        "/api/users",
        json=_create_body(managerId=str(employee.id)),
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


def test_create_user_unknown_department(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    client = TestClient(app)
    r = client.post(
        "/api/users",
        json=_create_body(departmentId=str(uuid.uuid4())),
        headers=auth_headers(admin),
    )
    assert r.status_code == 404


def test_list_users_admin_only_and_filters(db_session):
    admin = create_user(db_session, "sys", role="SYSTEM_ADMIN", last_name="Zed")
    employee = create_user(db_session, "emp", last_name="Adams")
    create_user(db_session, "boss", role="MANAGER", last_name="Brown")

    client = TestClient(app)
    assert client.get("/api/users", headers=auth_headers(employee)).status_code == 403

    r = client.get("/api/users", headers=auth_headers(admin))
    assert r.status_code == 200
    assert [u["lastName"] for u in r.json()["items"]] == ["Adams", "Brown", "Zed"]

    r = client.get("/api/users?role=MANAGER", headers=auth_headers(admin))
    assert [u["username"] for u in r.json()["items"]] == ["boss"]


def test_get_user_access_rules(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    report = create_user(db_session, "report", manager=manager)
    stranger = create_user(db_session, "stranger")
    skip_level = create_user(db_session, "bigboss", role="MANAGER")
    manager.manager_id = skip_level.id
    db_session.commit()

    client = TestClient(app)
    # self
    assert client.get(f"/api/users/{report.id}", headers=auth_headers(report)).status_code == 200
    # direct manager
    assert client.get(f"/api/users/{report.id}", headers=auth_headers(manager)).status_code == 200
    # unrelated employee
    assert client.get(f"/api/users/{report.id}", headers=auth_headers(stranger)).status_code == 403
    # the manager's manager: only one level is checked
    assert client.get(f"/api/users/{report.id}", headers=auth_headers(skip_level)).status_code == 403


def test_get_missing_user_does_not_leak_existence(db_session):
    employee = create_user(db_session, "emp")
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    client = TestClient(app)
    missing = uuid.uuid4()
    assert client.get(f"/api/users/{missing}", headers=auth_headers(employee)).status_code == 403
    assert client.get(f"/api/users/{missing}", headers=auth_headers(admin)).status_code == 404


def test_me_returns_detailed_profile(db_session):
    org = create_organization(db_session, "Acme")
    dept = create_department(db_session, org, "Engineering")
    user = create_user(db_session, "alice", department=dept)
    client = TestClient(app)
    r = client.get("/api/users/me", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["department"]["name"] == "Engineering"


def test_update_own_profile_drops_restricted_fields(db_session):
    user = create_user(db_session, "alice", first_name="Alice")
    client = TestClient(app)
    r = client.put(
        "/api/users/me",
        json={"role": "SYSTEM_ADMIN", "active": False, "firstName": "X"},
        headers=auth_headers(user),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == "X"
    assert body["role"] == "EMPLOYEE"
    assert body["active"] is True


def test_update_own_profile_username_conflict(db_session):
    create_user(db_session, "taken")
    user = create_user(db_session, "alice")
    client = TestClient(app)
    r = client.put("/api/users/me", json={"username": "taken"}, headers=auth_headers(user))
    assert r.status_code == 409


def test_admin_update_any_field(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    manager = create_user(db_session, "boss", role="MANAGER")
    org = create_organization(db_session)
    dept = create_department(db_session, org)
    user = create_user(db_session, "alice")

    client = TestClient(app)
    headers = auth_headers(admin)
    r = client.put(
        f"/api/users/{user.id}",
        json={"role": "MANAGER", "departmentId": str(dept.id), "managerId": str(manager.id)},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["role"] == "MANAGER"

    detail = client.get(f"/api/users/{user.id}", headers=headers).json()
    assert detail["department"]["id"] == str(dept.id)
    assert detail["manager"]["id"] == str(manager.id)

    # explicit nulls clear department and manager
    client.put(f"/api/users/{user.id}", json={"departmentId": None, "managerId": None}, headers=headers)
    detail = client.get(f"/api/users/{user.id}", headers=headers).json()
    assert detail["department"] is None
    assert detail["manager"] is None


def test_admin_update_rejects_self_management(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    manager = create_user(db_session, "boss", role="MANAGER")
    client = TestClient(app)
    r = client.put(
        f"/api/users/{manager.id}",
        json={"managerId": str(manager.id)},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


def test_update_user_requires_admin(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    report = create_user(db_session, "report", manager=manager)
    client = TestClient(app)
    r = client.put(f"/api/users/{report.id}", json={"firstName": "X"}, headers=auth_headers(manager))
    assert r.status_code == 403


def test_my_department_for_manager(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    org = create_organization(db_session)
    dept = create_department(db_session, org, "Engineering", manager=manager)
    other_dept = create_department(db_session, org, "Sales", manager=manager)
    create_department(db_session, org, "Unmanaged")
    create_user(db_session, "u1", department=dept, last_name="Adams")
    create_user(db_session, "u2", department=dept, last_name="Brown")
    create_user(db_session, "u3", department=other_dept, last_name="Clark")
    create_user(db_session, "outsider")

    client = TestClient(app)
    r = client.get("/api/users/my-department", headers=auth_headers(manager))
    assert r.status_code == 200
    usernames = [u["username"] for u in r.json()]
    assert usernames == ["u1", "u2", "u3"]
    assert len(set(usernames)) == len(usernames)


def test_my_department_for_manager_of_single_department(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    org = create_organization(db_session)
    dept = create_department(db_session, org, "Engineering", manager=manager)
    create_user(db_session, "u1", department=dept)
    create_user(db_session, "u2", department=dept)

    client = TestClient(app)
    r = client.get("/api/users/my-department", headers=auth_headers(manager))
    assert {u["username"] for u in r.json()} == {"u1", "u2"}


def test_my_department_admin_sees_everyone_and_manager_without_departments_sees_none(db_session):
    admin = create_user(db_session, "sys", role="SYSTEM_ADMIN")
    manager = create_user(db_session, "boss", role="MANAGER")
    employee = create_user(db_session, "emp")

    client = TestClient(app)
    r = client.get("/api/users/my-department", headers=auth_headers(admin))
    assert {u["username"] for u in r.json()} == {"sys", "boss", "emp"}

    r = client.get("/api/users/my-department", headers=auth_headers(manager))
    assert r.json() == []

    r = client.get("/api/users/my-department", headers=auth_headers(employee))
    assert r.status_code == 403


def test_my_reports(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    create_user(db_session, "r1", manager=manager)
    create_user(db_session, "r2", manager=manager)
    employee = create_user(db_session, "emp")

    client = TestClient(app)
    r = client.get("/api/users/my-reports", headers=auth_headers(manager))
    assert {u["username"] for u in r.json()} == {"r1", "r2"}

    assert client.get("/api/users/my-reports", headers=auth_headers(employee)).status_code == 403

    # directReportsCount is reported on the manager
    me = client.get("/api/users/me", headers=auth_headers(manager)).json()
    assert me["directReportsCount"] == 2


def test_update_performance(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    report = create_user(db_session, "report", manager=manager)
    stranger = create_user(db_session, "stranger", role="MANAGER")

    client = TestClient(app)
    payload = {
        "currentPerformanceRating": 4,
        "lastReviewNotes": "Solid year",
        "lastReviewDate": "2026-09-30",
        "currentGoals": "Lead a project",
    }
    assert (
        client.patch(f"/api/users/{report.id}/performance", json=payload, headers=auth_headers(stranger)).status_code
        == 403
    )

    r = client.patch(f"/api/users/{report.id}/performance", json=payload, headers=auth_headers(manager))
    assert r.status_code == 200
    body = r.json()
    assert body["currentPerformanceRating"] == 4
    assert body["currentPerformanceRatingText"] == "Exceeds Expectations"
    assert body["lastReviewDate"] == "2026-09-30"
    assert body["hasPerformanceData"] is True


def test_update_performance_rejects_out_of_range_rating(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    user = create_user(db_session, "alice")
    client = TestClient(app)
    r = client.patch(
        f"/api/users/{user.id}/performance",
        json={"currentPerformanceRating": 6},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400
    assert "currentPerformanceRating" in r.json()["validationErrors"]


def test_deactivate_and_delete_are_system_admin_only(db_session):
    hr = create_user(db_session, "hr", role="HR_ADMIN")
    sys_admin = create_user(db_session, "sys", role="SYSTEM_ADMIN")
    user = create_user(db_session, "alice")

    client = TestClient(app)
    assert client.patch(f"/api/users/{user.id}/deactivate", headers=auth_headers(hr)).status_code == 403
    assert client.delete(f"/api/users/{user.id}", headers=auth_headers(hr)).status_code == 403

    r = client.patch(f"/api/users/{user.id}/deactivate", headers=auth_headers(sys_admin))
    assert r.status_code == 200
    assert r.json() == {"message": "User deactivated successfully"}

    r = client.delete(f"/api/users/{user.id}", headers=auth_headers(sys_admin))
    assert r.status_code == 200
    assert client.get(f"/api/users/{user.id}", headers=auth_headers(sys_admin)).status_code == 404


def test_delete_blocked_by_direct_reports(db_session):
    sys_admin = create_user(db_session, "sys", role="SYSTEM_ADMIN")
    manager = create_user(db_session, "boss", role="MANAGER")
    create_user(db_session, "report", manager=manager)

    client = TestClient(app)
    r = client.delete(f"/api/users/{manager.id}", headers=auth_headers(sys_admin))
    assert r.status_code == 409


def test_manager_with_department_or_reports_cannot_become_employee(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    boss = create_user(db_session, "boss", role="MANAGER")
    org = create_organization(db_session)
    dept = create_department(db_session, org, "Engineering", manager=boss)
    create_user(db_session, "report", manager=boss)

    client = TestClient(app)
    headers = auth_headers(admin)
    r = client.put(f"/api/users/{boss.id}", json={"role": "EMPLOYEE"}, headers=headers)
    assert r.status_code == 400
    assert "reassign" in r.json()["message"]

    r = client.get(f"/api/departments/{dept.id}", headers=headers)
    assert r.json()["manager"]["id"] == str(boss.id)
    assert client.get(f"/api/users/{boss.id}", headers=headers).json()["role"] == "MANAGER"

    # moving between qualifying roles is fine
    r = client.put(f"/api/users/{boss.id}", json={"role": "HR_ADMIN"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["role"] == "HR_ADMIN"


def test_department_manager_without_reports_cannot_become_employee(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    boss = create_user(db_session, "boss", role="MANAGER")
    org = create_organization(db_session)
    create_department(db_session, org, "Engineering", manager=boss)

    client = TestClient(app)
    r = client.put(f"/api/users/{boss.id}", json={"role": "EMPLOYEE"}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_manager_with_nothing_to_manage_can_become_employee(db_session):
    admin = create_user(db_session, "hr", role="HR_ADMIN")
    boss = create_user(db_session, "boss", role="MANAGER")

    client = TestClient(app)
    r = client.put(f"/api/users/{boss.id}", json={"role": "EMPLOYEE"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["role"] == "EMPLOYEE"


def test_update_performance_accepts_put(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    report = create_user(db_session, "report", manager=manager)

    client = TestClient(app)
    r = client.put(
        f"/api/users/{report.id}/performance",
        json={"currentPerformanceRating": 3, "currentGoals": "Ship v2"},
        headers=auth_headers(manager),
    )
    assert r.status_code == 200
    assert r.json()["currentPerformanceRatingText"] == "Meets Expectations"
    assert r.json()["currentGoals"] == "Ship v2"


def test_team_performance(db_session):
    manager = create_user(db_session, "boss", role="MANAGER")
    rated = create_user(db_session, "rated", manager=manager, last_name="Adams")
    create_user(db_session, "unrated", manager=manager, last_name="Brown")
    create_user(db_session, "elsewhere")
    employee = create_user(db_session, "emp")
    rated.current_performance_rating = 5
    db_session.commit()

    client = TestClient(app)
    r = client.get("/api/users/team-performance", headers=auth_headers(manager))
    assert r.status_code == 200
    body = r.json()
    assert [u["username"] for u in body] == ["rated", "unrated"]
    assert body[0]["currentPerformanceRatingText"] == "Outstanding"
    assert body[0]["hasPerformanceData"] is True
    assert body[1]["currentPerformanceRatingText"] == "Not Rated"
    assert body[0]["manager"]["id"] == str(manager.id)

    r = client.get("/api/users/team-performance", headers=auth_headers(employee))
    assert r.status_code == 403
