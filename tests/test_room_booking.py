from unittest.mock import patch

import pytest

BOOKING = {
    "department": "CSE",
    "mobile_number": "9000000001",
    "room_type": "Auditorium",
    "date": "2030-03-15",
    "time_from": "10:00",
    "time_to": "12:00",
    "purpose": "Guest lecture",
    "facilities": ["Projector", "Mic"],
    "participant_chairs": 120,
    "agreed": True,
}


async def book(client, headers, **overrides):
    return await client.post("/api/room-booking/", json={**BOOKING, **overrides}, headers=headers)


@pytest.mark.asyncio
async def test_create_booking(client, user_headers):
    res = await book(client, user_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["username"] == "alice"
    assert body["status"] == "Pending"
    assert body["facilities"] == ["Projector", "Mic"]


@pytest.mark.asyncio
async def test_overlap_is_rejected(client, user_headers, other_user_headers):
    await book(client, user_headers)

    res = await book(client, other_user_headers, time_from="11:00", time_to="13:00")
    assert res.status_code == 409
    assert res.json()["detail"] == "Room already booked for the selected time range."


@pytest.mark.asyncio
async def test_touching_ranges_and_other_rooms_are_fine(client, user_headers):
    await book(client, user_headers)

    assert (await book(client, user_headers, time_from="12:00", time_to="13:00")).status_code == 201
    assert (await book(client, user_headers, time_from="08:00", time_to="10:00")).status_code == 201
    assert (await book(client, user_headers, room_type="Insight")).status_code == 201
    assert (await book(client, user_headers, date="2030-03-16")).status_code == 201


@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_slot(client, user_headers, other_user_headers):
    booking = (await book(client, user_headers)).json()

    res = await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Cancelled"},
        headers=user_headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "Cancelled"

    assert (await book(client, other_user_headers)).status_code == 201


@pytest.mark.asyncio
async def test_reinstating_a_cancelled_booking_rechecks_overlap(
    client, admin_headers, user_headers, other_user_headers
):
    booking = (await book(client, user_headers)).json()
    await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Cancelled"},
        headers=user_headers,
    )
    assert (await book(client, other_user_headers, time_from="11:00", time_to="13:00")).status_code == 201

    res = await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Pending"},
        headers=user_headers,
    )
    assert res.status_code == 409
    assert res.json()["detail"] == "Room already booked for the selected time range."

    res = await client.put(f"/api/room-booking/{booking['id']}/confirm", headers=admin_headers)
    assert res.status_code == 409

    res = await client.put(f"/api/room-booking/{booking['id']}", json={"status": "Booked"}, headers=admin_headers)
    assert res.status_code == 409

    res = await client.get("/api/room-booking/", headers=user_headers)
    assert res.json()[0]["status"] == "Cancelled"


@pytest.mark.asyncio
async def test_reinstating_into_a_free_slot_is_allowed(client, user_headers):
    booking = (await book(client, user_headers)).json()
    await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Cancelled"},
        headers=user_headers,
    )

    res = await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Pending"},
        headers=user_headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "Pending"


@pytest.mark.asyncio
async def test_times_and_dates_are_normalized(client, user_headers, other_user_headers):
    res = await book(client, user_headers, time_from="10:00:00", time_to="12:00:00")
    assert res.status_code == 201
    assert res.json()["time_from"] == "10:00"
    assert res.json()["time_to"] == "12:00"
    assert res.json()["date"] == "2030-03-15"

    res = await book(client, other_user_headers, time_from="11:30", time_to="12:30")
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_time_range_must_be_ordered(client, user_headers):
    res = await book(client, user_headers, time_from="14:00", time_to="09:00")
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_malformed_time_is_a_validation_error(client, user_headers):
    res = await book(client, user_headers, time_from="ten o'clock")
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_users_only_list_their_own(client, admin_headers, user_headers, other_user_headers):
    await book(client, user_headers)
    await book(client, other_user_headers, room_type="Insight")

    res = await client.get("/api/room-booking/", params={"request_from": "bob"}, headers=user_headers)
    assert [b["username"] for b in res.json()] == ["alice"]

    res = await client.get("/api/room-booking/", headers=admin_headers)
    assert len(res.json()) == 2

    res = await client.get("/api/room-booking/", params={"department": "CSE"}, headers=admin_headers)
    assert len(res.json()) == 2


@pytest.mark.asyncio
async def test_only_owner_updates_status(client, user_headers, other_user_headers):
    booking = (await book(client, user_headers)).json()
    res = await client.put(
        f"/api/room-booking/update-status/{booking['id']}",
        json={"status": "Cancelled"},
        headers=other_user_headers,
    )
    assert res.status_code == 403
    assert res.json()["detail"] == "Unauthorized to update this booking"


@pytest.mark.asyncio
async def test_assign_staff_and_staff_views(client, admin_headers, user_headers, staff_headers):
    booking = (await book(client, user_headers)).json()

    with patch("app.services.email_service.send_email_via_smtp") as mock_send:
        res = await client.put(
            f"/api/room-booking/{booking['id']}/assign-staff",
            json={"staff_name": "Ravi Kumar"},
            headers=admin_headers,
        )
    assert res.status_code == 200
    assert res.json()["assigned_staff"] == "Ravi Kumar"
    assert mock_send.call_args.args[0] == "ravi@campus.edu"

    res = await client.get("/api/room-booking/assigned", headers=staff_headers)
    assert [b["id"] for b in res.json()] == [booking["id"]]

    res = await client.get("/api/room-booking/staff-all", params={"username": "ravi"}, headers=staff_headers)
    assert [b["id"] for b in res.json()] == [booking["id"]]

    res = await client.get("/api/room-booking/staff-all", headers=staff_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Username required"


@pytest.mark.asyncio
async def test_edit_rechecks_overlap(client, admin_headers, user_headers):
    first = (await book(client, user_headers)).json()
    second = (await book(client, user_headers, time_from="13:00", time_to="14:00")).json()

    res = await client.put(
        f"/api/room-booking/{second['id']}",
        json={"time_from": "11:30"},
        headers=user_headers,
    )
    assert res.status_code == 409

    # moving a booking within its own slot is not a clash with itself
    res = await client.put(
        f"/api/room-booking/{first['id']}",
        json={"time_to": "11:00", "purpose": "Shorter lecture"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["purpose"] == "Shorter lecture"


@pytest.mark.asyncio
async def test_edit_by_stranger_is_forbidden(client, user_headers, other_user_headers):
    booking = (await book(client, user_headers)).json()
    res = await client.put(
        f"/api/room-booking/{booking['id']}",
        json={"purpose": "mine now"},
        headers=other_user_headers,
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_remarks_and_confirm(client, admin_headers, user_headers):
    booking = (await book(client, user_headers)).json()

    res = await client.post(
        f"/api/room-booking/{booking['id']}/admin-remarks",
        json={"remarks": "Bring your own laptop"},
        headers=admin_headers,
    )
    assert res.json()["admin_remarks"] == "Bring your own laptop"

    res = await client.post(
        f"/api/room-booking/{booking['id']}/user-remarks",
        json={"remarks": "Noted"},
        headers=user_headers,
    )
    assert res.json()["user_remarks"] == "Noted"

    res = await client.put(f"/api/room-booking/{booking['id']}/confirm", headers=admin_headers)
    assert res.json()["status"] == "Booked"

    res = await client.put(f"/api/room-booking/{booking['id']}/confirm", headers=user_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_missing_booking(client, admin_headers):
    res = await client.put(
        "/api/room-booking/00000000-0000-0000-0000-000000000000/confirm",
        headers=admin_headers,
    )
    assert res.status_code == 404
    assert res.json()["detail"] == "Booking not found"
