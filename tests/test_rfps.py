RFP = {
    "payee_name": "Manila International Container Terminal",
    "requesting_unit": "Operations",
    "mode_of_payment": "Check",
    "particulars": [
        {"description": "Storage", "charging": "CLI001", "invoice_no": "INV-88", "amount": "8000"},
        {"description": "Demurrage", "amount": "2250.75"},
    ],
}


async def _create(client, headers, **overrides):
    res = await client.post("/api/rfps", json={**RFP, **overrides}, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()["data"]


async def test_create_rfp_sums_particulars(client, operator_headers):
    rfp = await _create(client, operator_headers)

    assert rfp["rfp_number"] == f"RFP-{rfp['id']:06d}"
    assert rfp["reference_no"] == rfp["rfp_number"]
    assert rfp["status"] == "draft"
    assert rfp["currency"] == "PHP"
    assert float(rfp["amount"]) == 10250.75
    assert [p["sequence"] for p in rfp["particulars"]] == [1, 2]


async def test_create_rfp_for_client(client, operator_headers, sample_client_id):
    rfp = await _create(client, operator_headers, client_id=sample_client_id)

    assert rfp["client_name"] == "Sample Corporation"


async def test_update_rfp_maps_currency(client, operator_headers):
    rfp = await _create(client, operator_headers)

    res = await client.patch(
        f"/api/rfps/{rfp['id']}",
        json={"version": rfp["version"], "currency": "usd", "exchange_rate": "57.5"},
        headers=operator_headers,
    )

    assert res.status_code == 200, res.text
    assert res.json()["data"]["currency"] == "USD"
    assert res.json()["data"]["version"] == 2


async def test_rfp_workflow_and_lock(client, operator_headers, manager_headers):
    rfp = await _create(client, operator_headers)

    res = await client.post(f"/api/rfps/{rfp['id']}/submit", headers=operator_headers)
    assert res.json()["data"]["status"] == "pending_approval"

    res = await client.patch(
        f"/api/rfps/{rfp['id']}",
        json={"version": res.json()["data"]["version"], "notes": "edit"},
        headers=operator_headers,
    )
    assert res.status_code == 409

    res = await client.post(
        f"/api/approvals/rfp/{rfp['id']}/reject",
        json={"comments": "No supporting receipts"},
        headers=manager_headers,
    )
    assert res.json()["data"]["status"] == "rejected"

    res = await client.post(f"/api/rfps/{rfp['id']}/revise", headers=operator_headers)
    assert res.json()["data"]["status"] == "draft"


async def test_delete_rfp(client, operator_headers, manager_headers):
    rfp = await _create(client, operator_headers)

    res = await client.delete(f"/api/rfps/{rfp['id']}", headers=manager_headers)
    assert res.status_code == 200

    res = await client.get("/api/rfps", headers=manager_headers)
    assert res.json()["data"]["total"] == 0


async def test_list_rfps_search(client, operator_headers):
    await _create(client, operator_headers)
    await _create(client, operator_headers, payee_name="Philippine Ports Authority")

    res = await client.get("/api/rfps", params={"search": "Ports"}, headers=operator_headers)

    assert res.json()["data"]["total"] == 1
    assert res.json()["data"]["items"][0]["payee_name"] == "Philippine Ports Authority"


async def test_patch_cannot_clear_payee(client, operator_headers):
    rfp = await _create(client, operator_headers)

    res = await client.patch(
        f"/api/rfps/{rfp['id']}",
        json={"version": rfp["version"], "payee_name": None, "rfp_date": None},
        headers=operator_headers,
    )

    assert res.status_code == 400
    assert res.json()["error_code"] == "VALIDATION_ERROR"
    assert res.json()["details"] == {"fields": ["payee_name", "rfp_date"]}
