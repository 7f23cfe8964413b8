import pytest

GATE_PASS = {
    "date": "2030-01-10T09:30:00",
    "type": "temporary",
    "department": "Library",
    "issued_to": "Sharma Movers",
    "purpose": "Shifting old shelves for repair",
    "vehicle_type": "Truck",
    "vehicle_reg_no": "KA01AB1234",
    "items": ["Steel shelf x4", "Reading table x2"],
}


@pytest.mark.asyncio
async def test_create_list_get_update(client, admin_headers):
    res = await client.post("/api/gatepass/", json=GATE_PASS, headers=admin_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["items"] == GATE_PASS["items"]

    res = await client.get("/api/gatepass/", headers=admin_headers)
    assert [g["id"] for g in res.json()] == [created["id"]]

    res = await client.get(f"/api/gatepass/{created['id']}", headers=admin_headers)
    assert res.json()["issued_to"] == "Sharma Movers"

    res = await client.put(
        f"/api/gatepass/{created['id']}",
        json={"type": "permanent", "items": ["Steel shelf x4"]},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["type"] == "permanent"
    assert res.json()["items"] == ["Steel shelf x4"]
    assert res.json()["purpose"] == GATE_PASS["purpose"]


@pytest.mark.asyncio
async def test_staff_can_issue_gate_pass(client, staff_headers):
    res = await client.post("/api/gatepass/", json=GATE_PASS, headers=staff_headers)
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_requesters_are_denied(client, user_headers):
    res = await client.get("/api/gatepass/", headers=user_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_validation(client, admin_headers):
    res = await client.post("/api/gatepass/", json={**GATE_PASS, "items": []}, headers=admin_headers)
    assert res.status_code == 422

    res = await client.post("/api/gatepass/", json={**GATE_PASS, "type": "forever"}, headers=admin_headers)
    assert res.status_code == 422

    created = (await client.post("/api/gatepass/", json=GATE_PASS, headers=admin_headers)).json()
    res = await client.put(f"/api/gatepass/{created['id']}", json={"items": []}, headers=admin_headers)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_missing_gate_pass(client, admin_headers):
    res = await client.get("/api/gatepass/00000000-0000-0000-0000-000000000000", headers=admin_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Gate Pass not found"


@pytest.mark.asyncio
async def test_issued_to_and_purpose_cannot_be_blank(client, admin_headers):
    res = await client.post("/api/gatepass/", json={**GATE_PASS, "issued_to": ""}, headers=admin_headers)
    assert res.status_code == 422

    created = (await client.post("/api/gatepass/", json=GATE_PASS, headers=admin_headers)).json()

    res = await client.put(f"/api/gatepass/{created['id']}", json={"issued_to": "   "}, headers=admin_headers)
    assert res.status_code == 422

    res = await client.put(f"/api/gatepass/{created['id']}", json={"purpose": ""}, headers=admin_headers)
    assert res.status_code == 422

    res = await client.get(f"/api/gatepass/{created['id']}", headers=admin_headers)
    assert res.json()["issued_to"] == "Sharma Movers"


@pytest.mark.asyncio
async def test_naive_and_offset_dates_are_stored(client, admin_headers):
    res = await client.post(
        "/api/gatepass/", json={**GATE_PASS, "date": "2030-01-10T09:30:00+05:30"}, headers=admin_headers
    )
    assert res.status_code == 201

    res = await client.post("/api/gatepass/", json=GATE_PASS, headers=admin_headers)
    assert res.status_code == 201
    assert res.json()["date"].startswith("2030-01-10T09:30:00")
    assert res.json()["created_at"]
