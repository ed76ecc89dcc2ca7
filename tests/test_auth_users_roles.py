from conftest import ADMIN_PASSWORD, USER_PASSWORD


async def _login(client, email, password):
    return await client.post("/api/auth/login", json={"email": email, "password": password})


# =====================================================
# AUTH
# =====================================================

async def test_login_returns_tokens_and_permissions(client):
    res = await _login(client, "manager@sbclc.com", USER_PASSWORD)

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["auth"]["token_type"] == "bearer"
    assert data["user"]["role"] == "manager"
    assert "approve" in data["user"]["permissions"]["approvals"]

    me = await client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {data['auth']['access_token']}"},
    )
    assert me.json()["data"]["username"] == "manager@sbclc.com"


async def test_admin_sees_full_catalog(client):
    res = await _login(client, "admin@sbclc.com", ADMIN_PASSWORD)

    permissions = res.json()["data"]["user"]["permissions"]
    assert permissions["approvals"] == ["view", "approve", "reject"]
    assert "roles" in permissions


async def test_login_with_wrong_password(client):
    res = await _login(client, "manager@sbclc.com", "not-it")

    assert res.status_code == 401
    assert res.json()["error_code"] == "UNAUTHORIZED"


async def test_refresh_rotates_token(client):
    login = (await _login(client, "operator@sbclc.com", USER_PASSWORD)).json()["data"]
    refresh_token = login["auth"]["refresh_token"]

    res = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    assert res.status_code == 200, res.text
    assert res.json()["data"]["refresh_token"] != refresh_token

    reused = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    assert reused.status_code == 401


async def test_logout_invalidates_access_token(client):
    login = (await _login(client, "operator@sbclc.com", USER_PASSWORD)).json()["data"]
    headers = {"Authorization": f"Bearer {login['auth']['access_token']}"}

    res = await client.post("/api/auth/logout", headers=headers)
    assert res.status_code == 200

    res = await client.get("/api/auth/me", headers=headers)
    assert res.status_code == 401


async def test_malformed_token_is_401(client):
    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})

    assert res.status_code == 401


# =====================================================
# USERS
# =====================================================

async def test_admin_creates_user(client, admin_headers):
    res = await client.post(
        "/api/users",
        json={"email": "new.clerk@sbclc.com", "password": "clerk-pass", "role": "operator", "full_name": "New Clerk"},
        headers=admin_headers,
    )

    assert res.status_code == 200, res.text
    assert res.json()["data"]["role"] == "operator"

    dup = await client.post(
        "/api/users",
        json={"email": "new.clerk@sbclc.com", "password": "clerk-pass", "role": "operator"},
        headers=admin_headers,
    )
    assert dup.status_code == 409
    assert dup.json()["error_code"] == "USER_EMAIL_EXISTS"


async def test_create_user_with_unknown_role(client, admin_headers):
    res = await client.post(
        "/api/users",
        json={"email": "ghost@sbclc.com", "password": "ghost-pass", "role": "ghost"},
        headers=admin_headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "USER_ROLE_INVALID"


async def test_manager_cannot_manage_users(client, manager_headers):
    res = await client.get("/api/users", headers=manager_headers)

    assert res.status_code == 403


async def test_list_users_filters_by_role(client, admin_headers):
    res = await client.get("/api/users", params={"role": "viewer"}, headers=admin_headers)

    items = res.json()["data"]["items"]
    assert [u["username"] for u in items] == ["viewer@sbclc.com"]


async def test_role_change_revokes_sessions(client, admin_headers, users, viewer_headers):
    viewer = users["viewer"]

    res = await client.patch(
        f"/api/users/{viewer.id}",
        json={"role": "supervisor", "version": viewer.version},
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["role"] == "supervisor"

    res = await client.get("/api/auth/me", headers=viewer_headers)
    assert res.status_code == 401


async def test_deactivate_and_reactivate_user(client, admin_headers, users, operator_headers):
    operator = users["operator"]

    res = await client.post(
        f"/api/users/{operator.id}/deactivate",
        json={"version": operator.version},
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["is_active"] is False

    blocked = await _login(client, "operator@sbclc.com", USER_PASSWORD)
    assert blocked.status_code == 403

    res = await client.post(
        f"/api/users/{operator.id}/activate",
        json={"version": res.json()["data"]["version"]},
        headers=admin_headers,
    )
    assert res.json()["data"]["is_active"] is True


async def test_admin_cannot_deactivate_self(client, admin_headers, users):
    admin = users["admin"]

    res = await client.post(
        f"/api/users/{admin.id}/deactivate",
        json={"version": admin.version},
        headers=admin_headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "CANNOT_DEACTIVATE_SELF"


# =====================================================
# ROLES
# =====================================================

async def test_list_roles_with_counts(client, admin_headers):
    res = await client.get("/api/roles", headers=admin_headers)

    roles = {r["role_code"]: r for r in res.json()["data"]}
    assert set(roles) == {"admin", "manager", "supervisor", "operator", "viewer"}
    assert roles["manager"]["user_count"] == 1
    assert roles["viewer"]["permissions"]["approvals"] == ["view"]


async def test_custom_role_grants_approval(client, admin_headers, pending_quotation):
    res = await client.post(
        "/api/roles",
        json={
            "role_code": "finance",
            "role_name": "Finance Officer",
            "permissions": {"approvals": ["view", "approve"]},
        },
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text

    user = await client.post(
        "/api/users",
        json={"email": "finance@sbclc.com", "password": "finance-pass", "role": "finance"},
        headers=admin_headers,
    )
    assert user.status_code == 200, user.text

    login = (await _login(client, "finance@sbclc.com", "finance-pass")).json()["data"]
    finance_headers = {"Authorization": f"Bearer {login['auth']['access_token']}"}

    q = await pending_quotation()
    res = await client.post(f"/api/approvals/quotation/{q['id']}/approve", headers=finance_headers)
    assert res.status_code == 200, res.text


async def test_replace_permissions_rejects_unknown(client, admin_headers):
    res = await client.put(
        "/api/roles/viewer/permissions",
        json={"permissions": {"approvals": ["launch"]}},
        headers=admin_headers,
    )

    assert res.status_code == 400
    assert res.json()["details"]["unknown"] == ["approvals.launch"]


async def test_revoking_permission_takes_effect(client, admin_headers, supervisor_headers):
    res = await client.put(
        "/api/roles/supervisor/permissions",
        json={"permissions": {"quotations": ["view"]}},
        headers=admin_headers,
    )
    assert res.json()["data"] == {"quotations": ["view"]}

    res = await client.get("/api/approvals", headers=supervisor_headers)
    assert res.status_code == 403


async def test_role_in_use_cannot_be_deleted(client, admin_headers):
    res = await client.delete("/api/roles/manager", headers=admin_headers)

    assert res.status_code == 409
    assert res.json()["error_code"] == "ROLE_IN_USE"


async def test_activity_log_records_workflow(client, admin_headers, pending_quotation):
    q = await pending_quotation()

    res = await client.get("/api/activities", headers=admin_headers)

    messages = [a["message"] for a in res.json()["data"]["items"]]
    assert any(f"submitted quotation {q['quotation_number']} for approval" in m for m in messages)
