# app/services/room_booking_service.py

from datetime import time
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.columns import utc_now
from app.models.enums import BookingStatus
from app.models.room_booking import RoomBooking

OVERLAP_MESSAGE = "Room already booked for the selected time range."
SLOT_FIELDS = ("room_type", "date", "time_from", "time_to")


class BookingConflict(Exception):
    pass


def _t(value: str) -> time:
    return time.fromisoformat(value)


def validate_time_range(time_from: str, time_to: str):
    if _t(time_from) >= _t(time_to):
        raise ValueError("time_from must be earlier than time_to")


async def find_overlap(
    session: AsyncSession,
    room_type: str,
    date: str,
    time_from: str,
    time_to: str,
    exclude_id: Optional[UUID] = None,
) -> RoomBooking | None:
    """
    Naive overlap: same room, same date, not cancelled, and
    existing.from < new.to and existing.to > new.from.
    """
    query = select(RoomBooking).where(
        RoomBooking.room_type == room_type,
        RoomBooking.date == date,
        RoomBooking.status != BookingStatus.Cancelled,
    )
    if exclude_id is not None:
        query = query.where(RoomBooking.id != exclude_id)

    result = await session.execute(query)
    start, end = _t(time_from), _t(time_to)

    for booking in result.scalars().all():
        if _t(booking.time_from) < end and _t(booking.time_to) > start:
            return booking
    return None


def mail_context(booking: RoomBooking) -> dict:
    return {
        "id": str(booking.id),
        "username": booking.username,
        "department": booking.department,
        "room_type": booking.room_type,
        "date": booking.date,
        "time_from": booking.time_from,
        "time_to": booking.time_to,
        "purpose": booking.purpose,
        "facilities": list(booking.facilities or []),
    }


# ===================================================================
# CREATE
# ===================================================================
async def create_booking(session: AsyncSession, username: str, data: dict) -> RoomBooking:
    validate_time_range(data["time_from"], data["time_to"])

    clash = await find_overlap(session, data["room_type"], data["date"], data["time_from"], data["time_to"])
    if clash:
        raise BookingConflict(OVERLAP_MESSAGE)

    booking = RoomBooking(username=username, **data)
    session.add(booking)
    await session.commit()
    await session.refresh(booking)

    logger.info(f"Room booking {booking.id}: {booking.room_type} on {booking.date} "
                f"{booking.time_from}-{booking.time_to} by {username}")
    return booking


# ===================================================================
# QUERIES
# ===================================================================
async def get_booking(session: AsyncSession, booking_id: UUID) -> RoomBooking | None:
    return await session.get(RoomBooking, booking_id)


async def list_bookings(
    session: AsyncSession,
    username: Optional[str] = None,
    department: Optional[str] = None,
) -> list[RoomBooking]:
    query = select(RoomBooking)
    if username:
        query = query.where(RoomBooking.username == username)
    if department:
        query = query.where(RoomBooking.department == department)

    result = await session.execute(query.order_by(RoomBooking.created_at.desc()))
    return result.scalars().all()


async def list_assigned(session: AsyncSession, staff_name: str) -> list[RoomBooking]:
    result = await session.execute(
        select(RoomBooking)
        .where(RoomBooking.assigned_staff == staff_name)
        .order_by(RoomBooking.created_at.desc())
    )
    return result.scalars().all()


async def list_related(session: AsyncSession, username: str, staff_name: Optional[str] = None) -> list[RoomBooking]:
    """Bookings requested by `username`, or assigned to that person (stored by display name)."""
    result = await session.execute(
        select(RoomBooking)
        .where(or_(RoomBooking.username == username, RoomBooking.assigned_staff == (staff_name or username)))
        .order_by(RoomBooking.created_at.desc())
    )
    return result.scalars().all()


# ===================================================================
# UPDATES
# ===================================================================
async def _save(session: AsyncSession, booking: RoomBooking) -> RoomBooking:
    booking.updated_at = utc_now()
    session.add(booking)
    await session.commit()
    await session.refresh(booking)
    return booking


async def _ensure_slot_free(session: AsyncSession, booking: RoomBooking, slot: dict):
    validate_time_range(slot["time_from"], slot["time_to"])
    clash = await find_overlap(
        session, slot["room_type"], slot["date"], slot["time_from"], slot["time_to"], exclude_id=booking.id
    )
    if clash:
        raise BookingConflict(OVERLAP_MESSAGE)


def _reinstates(booking: RoomBooking, status: Optional[BookingStatus]) -> bool:
    # leaving Cancelled claims the slot again
    return (
        status is not None
        and BookingStatus(booking.status) == BookingStatus.Cancelled
        and BookingStatus(status) != BookingStatus.Cancelled
    )


async def update_booking(session: AsyncSession, booking: RoomBooking, changes: dict) -> RoomBooking:
    changes = {k: v for k, v in changes.items() if v is not None}

    slot = {f: changes.get(f, getattr(booking, f)) for f in SLOT_FIELDS}
    new_status = changes.get("status", booking.status)

    claims_slot = BookingStatus(new_status) != BookingStatus.Cancelled
    if claims_slot and (any(f in changes for f in SLOT_FIELDS) or _reinstates(booking, changes.get("status"))):
        await _ensure_slot_free(session, booking, slot)
    elif any(f in ("time_from", "time_to") for f in changes):
        validate_time_range(slot["time_from"], slot["time_to"])

    for field, value in changes.items():
        setattr(booking, field, value)

    return await _save(session, booking)


async def assign_staff(session: AsyncSession, booking: RoomBooking, staff_name: str) -> RoomBooking:
    booking.assigned_staff = staff_name
    return await _save(session, booking)


async def set_status(session: AsyncSession, booking: RoomBooking, status: BookingStatus) -> RoomBooking:
    if _reinstates(booking, status):
        await _ensure_slot_free(session, booking, {f: getattr(booking, f) for f in SLOT_FIELDS})

    booking.status = status
    return await _save(session, booking)


async def set_admin_remarks(session: AsyncSession, booking: RoomBooking, remarks: str) -> RoomBooking:
    booking.admin_remarks = remarks
    return await _save(session, booking)


async def set_user_remarks(session: AsyncSession, booking: RoomBooking, remarks: str) -> RoomBooking:
    booking.user_remarks = remarks
    return await _save(session, booking)
