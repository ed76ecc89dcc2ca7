from decimal import Decimal


def rule_payload(**overrides) -> dict:
    payload = {
        "transactionType": "quotation",
        "department": "All Departments",
        "minAmount": 0,
        "maxAmount": 100000,
        "active": True,
        "approvers": [
            {"role": "supervisor", "required": True, "canDelegate": False},
            {"role": "manager", "required": True, "canDelegate": True},
        ],
    }
    payload.update(overrides)
    return payload


async def _create(client, headers, **overrides) -> dict:
    res = await client.post("/api/approval_matrix", json=rule_payload(**overrides), headers=headers)
    assert res.status_code == 200, res.text
    return res.json()["data"]


async def test_create_rule_numbers_levels_in_order(client, admin_headers):
    rule = await _create(client, admin_headers)

    assert rule["transaction_type"] == "quotation"
    assert Decimal(str(rule["min_amount"])) == 0
    assert Decimal(str(rule["max_amount"])) == Decimal("100000")
    assert rule["version"] == 1
    assert rule["created_by_name"] == "admin@sbclc.com"
    assert [(a["level"], a["role"], a["can_delegate"]) for a in rule["approvers"]] == [
        (1, "supervisor", False),
        (2, "manager", True),
    ]


async def test_snake_case_payload_is_accepted(client, manager_headers, users):
    res = await client.post(
        "/api/approval_matrix",
        json={
            "transaction_type": "rfp",
            "min_amount": "50000",
            "max_amount": None,
            "is_active": True,
            "approvers": [{"role": "manager", "user_id": users["manager"].id}],
        },
        headers=manager_headers,
    )

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["department"] == "All Departments"
    assert data["max_amount"] is None
    assert data["approvers"][0]["user_name"] == "Maria Manager"


async def test_no_limit_sentinel_is_stored_as_open_band(client, admin_headers):
    rule = await _create(client, admin_headers, minAmount=100000, maxAmount=999999999)

    assert rule["max_amount"] is None


async def test_list_and_filter_rules(client, admin_headers, viewer_headers):
    first = await _create(client, admin_headers)
    second = await _create(client, admin_headers, transactionType="rfp")
    hidden = await _create(client, admin_headers, active=False)

    res = await client.get("/api/approval_matrix", headers=viewer_headers)
    assert res.status_code == 200
    assert [r["id"] for r in res.json()["data"]["items"]] == [second["id"], first["id"]]

    res = await client.get("/api/approval_matrix", params={"type": "rfp"}, headers=viewer_headers)
    assert [r["id"] for r in res.json()["data"]["items"]] == [second["id"]]

    res = await client.get("/api/approval_matrix", params={"include_inactive": True}, headers=viewer_headers)
    assert hidden["id"] in {r["id"] for r in res.json()["data"]["items"]}


async def test_only_managers_change_the_matrix(client, operator_headers, viewer_headers, manager_headers):
    for headers in (operator_headers, viewer_headers):
        res = await client.post("/api/approval_matrix", json=rule_payload(), headers=headers)
        assert res.status_code == 403

    rule = await _create(client, manager_headers)
    res = await client.get(f"/api/approval_matrix/{rule['id']}", headers=operator_headers)
    assert res.status_code == 200

    res = await client.delete(f"/api/approval_matrix/{rule['id']}", headers=operator_headers)
    assert res.status_code == 403


async def test_band_must_not_be_inverted(client, admin_headers):
    res = await client.post(
        "/api/approval_matrix",
        json=rule_payload(minAmount=50000, maxAmount=10000),
        headers=admin_headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "VALIDATION_ERROR"


async def test_rule_needs_at_least_one_approver(client, admin_headers):
    res = await client.post("/api/approval_matrix", json=rule_payload(approvers=[]), headers=admin_headers)

    assert res.status_code == 422


async def test_unknown_approver_role_is_rejected(client, admin_headers):
    res = await client.post(
        "/api/approval_matrix",
        json=rule_payload(approvers=[{"role": "cfo"}, {"role": "manager"}]),
        headers=admin_headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "USER_ROLE_INVALID"
    assert res.json()["details"] == {"roles": ["cfo"]}


async def test_unknown_approver_user_is_rejected(client, admin_headers):
    res = await client.post(
        "/api/approval_matrix",
        json=rule_payload(approvers=[{"role": "manager", "userId": 9999}]),
        headers=admin_headers,
    )

    assert res.status_code == 404
    assert res.json()["error_code"] == "USER_NOT_FOUND"


async def test_update_replaces_approvers(client, admin_headers):
    rule = await _create(client, admin_headers)

    res = await client.put(
        f"/api/approval_matrix/{rule['id']}",
        json=rule_payload(
            version=rule["version"],
            maxAmount=250000,
            approvers=[
                {"role": "manager"},
                {"role": "supervisor"},
                {"role": "admin", "required": False},
            ],
        ),
        headers=admin_headers,
    )

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["version"] == rule["version"] + 1
    assert Decimal(str(data["max_amount"])) == Decimal("250000")
    assert [(a["level"], a["role"], a["required"]) for a in data["approvers"]] == [
        (1, "manager", True),
        (2, "supervisor", True),
        (3, "admin", False),
    ]


async def test_stale_update_is_refused(client, admin_headers):
    rule = await _create(client, admin_headers)
    fresh = await client.put(
        f"/api/approval_matrix/{rule['id']}",
        json=rule_payload(version=rule["version"], department="Operations"),
        headers=admin_headers,
    )
    assert fresh.status_code == 200, fresh.text

    stale = await client.put(
        f"/api/approval_matrix/{rule['id']}",
        json=rule_payload(version=rule["version"], department="Finance"),
        headers=admin_headers,
    )

    assert stale.status_code == 409
    assert stale.json()["error_code"] == "VERSION_CONFLICT"

    res = await client.get(f"/api/approval_matrix/{rule['id']}", headers=admin_headers)
    assert res.json()["data"]["department"] == "Operations"


async def test_delete_rule(client, admin_headers):
    rule = await _create(client, admin_headers)

    stale = await client.delete(
        f"/api/approval_matrix/{rule['id']}", params={"version": 7}, headers=admin_headers
    )
    assert stale.status_code == 409

    res = await client.delete(f"/api/approval_matrix/{rule['id']}", headers=admin_headers)
    assert res.status_code == 200, res.text

    gone = await client.get(f"/api/approval_matrix/{rule['id']}", headers=admin_headers)
    assert gone.status_code == 404
    assert gone.json()["error_code"] == "APPROVAL_RULE_NOT_FOUND"


async def test_resolve_picks_the_matching_band(client, admin_headers, viewer_headers):
    low = await _create(client, admin_headers, minAmount=0, maxAmount=100000)
    high = await _create(client, admin_headers, minAmount=100000, maxAmount=None)
    ops = await _create(client, admin_headers, department="Operations", minAmount=0, maxAmount=None)

    async def resolve(**params):
        res = await client.get("/api/approval_matrix/resolve", params=params, headers=viewer_headers)
        return res

    assert (await resolve(type="quotation", amount="5000")).json()["data"]["id"] == low["id"]
    # shared edge goes to the higher band
    assert (await resolve(type="quotation", amount="100000")).json()["data"]["id"] == high["id"]
    assert (await resolve(type="quotation", amount="5000", department="Operations")).json()["data"]["id"] == ops["id"]

    missing = await resolve(type="rfp", amount="5000")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "APPROVAL_RULE_NOT_FOUND"


async def test_role_used_by_matrix_cannot_be_deleted(client, admin_headers):
    res = await client.post(
        "/api/roles",
        json={"role_code": "finance", "role_name": "Finance Officer", "permissions": {"approvals": ["view"]}},
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text

    rule = await _create(client, admin_headers, approvers=[{"role": "finance"}])

    blocked = await client.delete("/api/roles/finance", headers=admin_headers)
    assert blocked.status_code == 409
    assert blocked.json()["error_code"] == "ROLE_IN_USE"
    assert blocked.json()["details"] == {"approval_rule_count": 1}

    await client.delete(f"/api/approval_matrix/{rule['id']}", headers=admin_headers)
    res = await client.delete("/api/roles/finance", headers=admin_headers)
    assert res.status_code == 200, res.text


async def test_matrix_changes_are_in_activity_log(client, admin_headers):
    rule = await _create(client, admin_headers)

    res = await client.get("/api/activities", headers=admin_headers)

    messages = [a["message"] for a in res.json()["data"]["items"]]
    assert any(f"created approval rule #{rule['id']} (quotation, All Departments) with 2 level(s)" in m for m in messages)
