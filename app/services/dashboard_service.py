# app/services/dashboard_service.py

from datetime import date, datetime, time, timezone
from typing import Optional

from sqlmodel import select
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import ROOM_TYPES
from app.models.enums import BookingStatus, RepairStatus
from app.models.repair_request import RepairRequest
from app.models.room_booking import RoomBooking
from app.models.staff import Staff
from app.schemas.dashboard import RepairSummary, StaffWorkload, RoomRequestCount

DONE_STATUSES = (RepairStatus.Completed, RepairStatus.Verified)


async def repair_summary(session: AsyncSession) -> RepairSummary:
    result = await session.execute(
        select(RepairRequest.status, func.count()).group_by(RepairRequest.status)
    )
    counts = {RepairStatus(status): total for status, total in result.all()}

    return RepairSummary(
        pending=counts.get(RepairStatus.Pending, 0),
        assigned=counts.get(RepairStatus.Assigned, 0),
        completed=counts.get(RepairStatus.Completed, 0),
        verified=counts.get(RepairStatus.Verified, 0),
    )


async def staff_workload(
    session: AsyncSession,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[StaffWorkload]:
    """
    Every staff member appears (zero counts allowed); assignees that no
    longer match a staff row are appended. The date window applies only
    when both bounds are given.
    """
    staff_names = (await session.execute(select(Staff.name).order_by(Staff.name))).scalars().all()
    rows = {name: {"name": name, "assigned": 0, "completed": 0} for name in staff_names}

    query = select(RepairRequest.assigned_to, RepairRequest.status).where(RepairRequest.assigned_to != "")
    if date_from and date_to:
        query = query.where(
            RepairRequest.created_at >= datetime.combine(date_from, time.min, tzinfo=timezone.utc),
            RepairRequest.created_at <= datetime.combine(date_to, time.max, tzinfo=timezone.utc),
        )

    for name, status in (await session.execute(query)).all():
        row = rows.setdefault(name, {"name": name, "assigned": 0, "completed": 0})
        row["assigned"] += 1
        if RepairStatus(status) in DONE_STATUSES:
            row["completed"] += 1

    return [StaffWorkload(**row) for row in rows.values()]


async def pending_room_requests(session: AsyncSession) -> list[RoomRequestCount]:
    result = await session.execute(
        select(RoomBooking.room_type, func.count())
        .where(RoomBooking.status == BookingStatus.Pending)
        .group_by(RoomBooking.room_type)
    )
    counts = dict(result.all())

    return [RoomRequestCount(name=room, count=counts.get(room, 0)) for room in ROOM_TYPES]
