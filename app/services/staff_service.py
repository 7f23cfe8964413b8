# app/services/staff_service.py

import uuid

from sqlmodel import select
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.security import hash_password
from app.models.columns import utc_now
from app.models.repair_request import RepairRequest
from app.models.room_booking import RoomBooking
from app.models.staff import Staff
from app.services.auth_service import username_taken


async def name_taken(session: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> bool:
    query = select(Staff.id).where(Staff.name == name)
    if exclude_id is not None:
        query = query.where(Staff.id != exclude_id)
    return (await session.execute(query.limit(1))).first() is not None


async def create_staff(
    session: AsyncSession,
    name: str,
    username: str,
    password: str,
    department: str,
    email: str | None = None,
    phone: str | None = None,
) -> Staff:

    if await username_taken(session, username):
        raise ValueError("Username already exists")

    if await name_taken(session, name):
        raise ValueError("Staff name already exists")

    staff = Staff(
        name=name,
        username=username,
        password_hash=hash_password(password),
        department=department,
        email=email or None,
        phone=phone or None,
    )
    session.add(staff)

    try:
        await session.commit()
        await session.refresh(staff)
        return staff

    except IntegrityError:
        await session.rollback()
        raise ValueError("Staff with this username, name or email already exists")


async def list_staff(session: AsyncSession) -> list[Staff]:
    result = await session.execute(select(Staff).order_by(Staff.created_at.desc()))
    return result.scalars().all()


async def get_staff_by_id(session: AsyncSession, staff_id: uuid.UUID) -> Staff | None:
    return await session.get(Staff, staff_id)


async def get_staff_by_name(session: AsyncSession, name: str) -> Staff | None:
    """
    Repair requests and bookings store the assignee by display name,
    so e-mail lookups resolve the staff row by name.
    """
    result = await session.execute(select(Staff).where(Staff.name == name).limit(1))
    return result.scalar_one_or_none()


async def update_staff(session: AsyncSession, staff: Staff, **changes) -> Staff:
    """
    A rename is carried over to every repair request and room booking
    assigned under the old name, in the same commit.
    """
    password = changes.pop("password", None)
    if password:
        staff.password_hash = hash_password(password)

    old_name = staff.name
    new_name = changes.pop("name", None)
    if new_name is not None:
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("Staff name cannot be empty")

        if new_name != old_name:
            if await name_taken(session, new_name, exclude_id=staff.id):
                raise ValueError("Staff name already exists")

            await session.execute(
                update(RepairRequest)
                .where(RepairRequest.assigned_to == old_name)
                .values(assigned_to=new_name)
            )
            await session.execute(
                update(RoomBooking)
                .where(RoomBooking.assigned_staff == old_name)
                .values(assigned_staff=new_name)
            )
            staff.name = new_name

    for field, value in changes.items():
        if value is not None:
            setattr(staff, field, value)

    staff.updated_at = utc_now()
    session.add(staff)

    try:
        await session.commit()
        await session.refresh(staff)
        return staff

    except IntegrityError:
        await session.rollback()
        raise ValueError("Staff name or email already in use")


async def delete_staff(session: AsyncSession, staff: Staff) -> None:
    await session.delete(staff)
    await session.commit()
