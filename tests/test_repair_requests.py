from unittest.mock import patch

import pytest


async def raise_request(client, headers, description="Ceiling fan not working in room 204", **extra):
    data = {"description": description, "is_new_requirement": "false", **extra}
    res = await client.post("/api/repair-requests/", data=data, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


def recipients(mock_send):
    return [call.args[0] for call in mock_send.call_args_list]


# ------------------------------------------------------------------
# CREATE
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_create_takes_identity_from_token(client, user_headers):
    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        body = await raise_request(client, user_headers)

    assert body["username"] == "alice"
    assert body["department"] == "CSE"
    assert body["role"] == "user"
    assert body["email"] == "alice@campus.edu"
    assert body["status"] == "Pending"
    assert body["assigned_to"] == ""
    assert body["file_url"] == ""
    assert body["remarks"] == []

    assert recipients(mock_send) == ["office@campus.edu"]


@pytest.mark.asyncio
async def test_create_with_attachment(client, user_headers):
    files = {"file": ("leak photo.png", b"\x89PNG fake", "image/png")}
    data = {"description": "Water leak", "is_new_requirement": "true"}

    res = await client.post("/api/repair-requests/", data=data, files=files, headers=user_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["is_new_requirement"] is True
    assert body["file_url"].startswith("/uploads/")
    assert body["file_url"].endswith("-leak_photo.png")

    served = await client.get(body["file_url"])
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"


@pytest.mark.asyncio
async def test_create_rejects_bad_extension(client, user_headers):
    files = {"file": ("payload.exe", b"MZ", "application/octet-stream")}
    res = await client.post(
        "/api/repair-requests/",
        data={"description": "x"},
        files=files,
        headers=user_headers,
    )
    assert res.status_code == 400
    assert "Invalid file type" in res.json()["detail"]


@pytest.mark.asyncio
async def test_create_rejects_oversize_attachment(client, admin_headers, user_headers, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 16)
    files = {"file": ("scan.pdf", b"%PDF" + b"0" * 64, "application/pdf")}

    res = await client.post(
        "/api/repair-requests/",
        data={"description": "Broken window"},
        files=files,
        headers=user_headers,
    )
    assert res.status_code == 400
    assert res.json()["detail"].startswith("File too large")

    listed = await client.get("/api/repair-requests/", headers=admin_headers)
    assert listed.json() == []


# ------------------------------------------------------------------
# STATUS PROGRESSION
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_full_progression_sends_notifications(client, admin_headers, user_headers, staff_headers):
    created = await raise_request(client, user_headers)
    rid = created["id"]

    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.put(
            f"/api/repair-requests/{rid}/assign",
            json={"staff_name": "Ravi Kumar"},
            headers=admin_headers,
        )
    assert res.status_code == 200
    assert res.json()["status"] == "Assigned"
    assert res.json()["assigned_to"] == "Ravi Kumar"
    assert recipients(mock_send) == ["ravi@campus.edu", "office@campus.edu", "alice@campus.edu"]

    # the assignee can complete
    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.put(f"/api/repair-requests/{rid}/complete", headers=staff_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "Completed"
    assert res.json()["completed_at"] is not None
    assert recipients(mock_send) == ["alice@campus.edu", "office@campus.edu"]

    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.put(f"/api/repair-requests/{rid}/verify", headers=admin_headers)
    body = res.json()
    assert res.status_code == 200
    assert body["status"] == "Verified"
    assert body["is_verified"] is True
    assert body["verified_by"] == "Office Admin"
    assert body["verified_at"] is not None
    assert recipients(mock_send) == ["office@campus.edu", "alice@campus.edu"]


@pytest.mark.asyncio
async def test_invalid_transitions_are_rejected(client, admin_headers, user_headers, staff_headers):
    rid = (await raise_request(client, user_headers))["id"]

    res = await client.put(f"/api/repair-requests/{rid}/complete", headers=admin_headers)
    assert res.status_code == 400
    assert "Pending" in res.json()["detail"] and "Completed" in res.json()["detail"]

    res = await client.put(f"/api/repair-requests/{rid}/verify", headers=admin_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_assign_unknown_staff(client, admin_headers, user_headers):
    rid = (await raise_request(client, user_headers))["id"]
    res = await client.put(
        f"/api/repair-requests/{rid}/assign",
        json={"staff_name": "Nobody"},
        headers=admin_headers,
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_requester_cannot_complete(client, admin_headers, user_headers, staff_headers):
    rid = (await raise_request(client, user_headers))["id"]
    await client.put(
        f"/api/repair-requests/{rid}/assign",
        json={"staff_name": "Ravi Kumar"},
        headers=admin_headers,
    )
    res = await client.put(f"/api/repair-requests/{rid}/complete", headers=user_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_edit_runs_progression(client, admin_headers, user_headers, staff_headers):
    rid = (await raise_request(client, user_headers))["id"]

    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.put(
            f"/api/repair-requests/{rid}",
            json={"assigned_to": "Ravi Kumar", "description": "Fan and light"},
            headers=admin_headers,
        )
    assert res.status_code == 200
    assert res.json()["status"] == "Assigned"
    assert res.json()["description"] == "Fan and light"
    assert "ravi@campus.edu" in recipients(mock_send)

    res = await client.put(
        f"/api/repair-requests/{rid}",
        json={"status": "Verified"},
        headers=admin_headers,
    )
    assert res.status_code == 400


# ------------------------------------------------------------------
# VISIBILITY / FILTERS
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_role_filtering(client, admin_headers, user_headers, other_user_headers, staff_headers):
    alice_req = await raise_request(client, user_headers, description="Projector broken")
    await raise_request(client, other_user_headers, description="Door lock jammed")

    await client.put(
        f"/api/repair-requests/{alice_req['id']}/assign",
        json={"staff_name": "Ravi Kumar"},
        headers=admin_headers,
    )

    alice = (await client.get("/api/repair-requests/", headers=user_headers)).json()
    assert [r["description"] for r in alice] == ["Projector broken"]

    staff = (await client.get("/api/repair-requests/", headers=staff_headers)).json()
    assert [r["description"] for r in staff] == ["Projector broken"]

    admin = (await client.get("/api/repair-requests/", headers=admin_headers)).json()
    assert len(admin) == 2

    # other users' requests are hidden even when fetched directly
    bob_view = await client.get(f"/api/repair-requests/{alice_req['id']}", headers=other_user_headers)
    assert bob_view.status_code == 404


@pytest.mark.asyncio
async def test_search_keeps_role_filter(client, user_headers, other_user_headers):
    await raise_request(client, user_headers, description="AC leaking")
    await raise_request(client, other_user_headers, description="AC not cooling")

    res = await client.get("/api/repair-requests/", params={"search": "ac"}, headers=user_headers)
    assert [r["description"] for r in res.json()] == ["AC leaking"]


@pytest.mark.asyncio
async def test_status_and_date_filters(client, admin_headers, user_headers, staff_headers):
    first = await raise_request(client, user_headers, description="one")
    await raise_request(client, user_headers, description="two")
    await client.put(
        f"/api/repair-requests/{first['id']}/assign",
        json={"staff_name": "Ravi Kumar"},
        headers=admin_headers,
    )

    res = await client.get("/api/repair-requests/", params={"status": "Assigned"}, headers=admin_headers)
    assert [r["description"] for r in res.json()] == ["one"]

    res = await client.get(
        "/api/repair-requests/", params={"assigned_to": "Ravi Kumar"}, headers=admin_headers
    )
    assert len(res.json()) == 1

    today = first["created_at"][:10]
    res = await client.get(
        "/api/repair-requests/",
        params={"date_from": today, "date_to": today},
        headers=admin_headers,
    )
    assert len(res.json()) == 2

    res = await client.get(
        "/api/repair-requests/", params={"date_to": "2000-01-01"}, headers=admin_headers
    )
    assert res.json() == []


# ------------------------------------------------------------------
# REMARKS
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_remarks_flow(client, admin_headers, user_headers):
    rid = (await raise_request(client, user_headers))["id"]

    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.post(
            f"/api/repair-requests/{rid}/remarks",
            json={"text": "Technician visits tomorrow"},
            headers=admin_headers,
        )
    assert res.status_code == 200
    remarks = res.json()["remarks"]
    assert len(remarks) == 1
    assert remarks[0]["entered_by"] == "Office Admin"
    assert recipients(mock_send) == ["alice@campus.edu"]

    remark_id = remarks[0]["id"]

    feed = (await client.get("/api/repair-requests/all-remarks", headers=admin_headers)).json()
    assert feed[0]["remark_id"] == remark_id
    assert feed[0]["username"] == "alice"
    assert feed[0]["seen"] is False

    res = await client.patch(
        f"/api/repair-requests/{rid}/remarks/{remark_id}/mark-seen", headers=user_headers
    )
    assert res.status_code == 200

    res = await client.patch(
        f"/api/repair-requests/{rid}/remarks/{remark_id}/mark-seen", headers=user_headers
    )
    assert res.status_code == 404
    assert res.json()["detail"] == "Remark not found or already marked"

    res = await client.patch(
        f"/api/repair-requests/{rid}/remarks/{remark_id}/verify", headers=admin_headers
    )
    assert res.status_code == 200
    assert res.json()["is_verified"] is True
    assert res.json()["verified_by"] == "Office Admin"

    res = await client.get(f"/api/repair-requests/{rid}/remarks", headers=user_headers)
    assert len(res.json()) == 1


@pytest.mark.asyncio
async def test_all_remarks_is_admin_only(client, user_headers):
    res = await client.get("/api/repair-requests/all-remarks", headers=user_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_delete_request_removes_remarks(client, admin_headers, user_headers):
    rid = (await raise_request(client, user_headers))["id"]
    await client.post(f"/api/repair-requests/{rid}/remarks", json={"text": "noted"}, headers=admin_headers)

    res = await client.delete(f"/api/repair-requests/{rid}", headers=admin_headers)
    assert res.status_code == 204

    res = await client.get(f"/api/repair-requests/{rid}", headers=admin_headers)
    assert res.status_code == 404

    feed = (await client.get("/api/repair-requests/all-remarks", headers=admin_headers)).json()
    assert feed == []
