async def test_seeded_master_data_is_listed(client, viewer_headers):
    categories = await client.get("/api/categories", headers=viewer_headers)
    containers = await client.get("/api/container-sizes", headers=viewer_headers)
    trucks = await client.get("/api/truck-sizes", headers=viewer_headers)

    assert categories.json()["data"]["total"] == 14
    assert containers.json()["data"]["total"] == 11
    assert trucks.json()["data"]["total"] == 14


async def test_categories_filter_by_type(client, viewer_headers):
    res = await client.get("/api/categories", params={"type": "expense"}, headers=viewer_headers)

    items = res.json()["data"]["items"]
    assert len(items) == 5
    assert {i["category_type"] for i in items} == {"expense"}


async def test_truck_sizes_filter_by_type(client, viewer_headers):
    res = await client.get("/api/truck-sizes", params={"type": "wingvan"}, headers=viewer_headers)

    items = res.json()["data"]["items"]
    assert items
    assert {i["truck_type"] for i in items} == {"wingvan"}


async def test_create_client_uppercases_code(client, manager_headers):
    res = await client.post(
        "/api/clients",
        json={"client_code": "abc-01", "client_name": "ABC Trading", "email": "ops@abctrading.com"},
        headers=manager_headers,
    )

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["client_code"] == "ABC-01"
    assert data["version"] == 1
    assert data["created_by_name"] == "manager@sbclc.com"

    dup = await client.post(
        "/api/clients",
        json={"client_code": "ABC-01", "client_name": "Other"},
        headers=manager_headers,
    )
    assert dup.status_code == 409
    assert dup.json()["error_code"] == "CLIENT_CODE_EXISTS"


async def test_operator_cannot_create_client(client, operator_headers):
    res = await client.post(
        "/api/clients",
        json={"client_code": "X1", "client_name": "X"},
        headers=operator_headers,
    )

    assert res.status_code == 403


async def test_update_client_checks_version(client, manager_headers, sample_client_id):
    res = await client.patch(
        f"/api/clients/{sample_client_id}",
        json={"version": 1, "payment_terms": "Net 15 Days"},
        headers=manager_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["payment_terms"] == "Net 15 Days"
    assert res.json()["data"]["version"] == 2

    stale = await client.patch(
        f"/api/clients/{sample_client_id}",
        json={"version": 1, "payment_terms": "COD"},
        headers=manager_headers,
    )
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "MASTER_DATA_VERSION_CONFLICT"


async def test_update_without_changes_is_400(client, manager_headers, sample_client_id):
    res = await client.patch(
        f"/api/clients/{sample_client_id}",
        json={"version": 1, "client_name": "Sample Corporation"},
        headers=manager_headers,
    )

    assert res.status_code == 400


async def test_deactivated_client_is_hidden(client, manager_headers, sample_client_id):
    res = await client.delete(f"/api/clients/{sample_client_id}", headers=manager_headers)
    assert res.status_code == 200
    assert res.json()["data"]["is_active"] is False

    assert (await client.get(f"/api/clients/{sample_client_id}", headers=manager_headers)).status_code == 404

    listing = await client.get("/api/clients", params={"include_inactive": True}, headers=manager_headers)
    assert listing.json()["data"]["total"] == 1


async def test_quotation_needs_active_client(client, manager_headers, operator_headers, sample_client_id):
    await client.delete(f"/api/clients/{sample_client_id}", headers=manager_headers)

    res = await client.post(
        "/api/quotations",
        json={"client_id": sample_client_id, "items": []},
        headers=operator_headers,
    )

    assert res.status_code == 404


async def test_category_name_is_unique(client, manager_headers):
    res = await client.post(
        "/api/categories",
        json={"category_name": "Port Charges", "category_type": "expense"},
        headers=manager_headers,
    )

    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_NAME_EXISTS"


async def test_category_with_parent(client, manager_headers):
    parents = await client.get("/api/categories", params={"type": "service"}, headers=manager_headers)
    parent_id = parents.json()["data"]["items"][0]["id"]

    res = await client.post(
        "/api/categories",
        json={"category_name": "Reefer Trucking", "category_type": "service", "parent_category_id": parent_id},
        headers=manager_headers,
    )

    assert res.status_code == 200, res.text
    assert res.json()["data"]["parent_category_id"] == parent_id


async def test_container_size_code_is_unique(client, manager_headers):
    res = await client.post(
        "/api/container-sizes",
        json={"size_name": "Twenty Foot", "size_code": "20ft", "teu_equivalent": 1},
        headers=manager_headers,
    )

    assert res.status_code == 409
    assert res.json()["error_code"] == "CONTAINER_SIZE_EXISTS"


async def test_truck_size_lifecycle(client, manager_headers):
    res = await client.post(
        "/api/truck-sizes",
        json={"size_name": "Prime Mover", "size_code": "PM", "truck_type": "other", "capacity_tons": 40},
        headers=manager_headers,
    )
    assert res.status_code == 200, res.text
    size = res.json()["data"]

    res = await client.patch(
        f"/api/truck-sizes/{size['id']}",
        json={"version": size["version"], "capacity_tons": 42},
        headers=manager_headers,
    )
    assert res.json()["data"]["capacity_tons"] == 42
    assert res.json()["data"]["version"] == size["version"] + 1

    res = await client.delete(f"/api/truck-sizes/{size['id']}", headers=manager_headers)
    assert res.json()["data"]["is_active"] is False
