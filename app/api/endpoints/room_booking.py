# app/api/endpoints/room_booking.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_current_account
from app.core.rbac import is_admin, require_admin
from app.models.enums import AccountRole, BookingStatus
from app.schemas.room_booking import (
    AssignBookingStaffRequest,
    BookingRemarksRequest,
    BookingStatusUpdate,
    RoomBookingCreate,
    RoomBookingRead,
    RoomBookingUpdate,
)
from app.services import email_service
from app.services import room_booking_service as bookings
from app.services.room_booking_service import BookingConflict
from app.services.staff_service import get_staff_by_name

router = APIRouter(prefix="/api/room-booking", tags=["Room Booking"])


async def _load(session: AsyncSession, booking_id: UUID):
    booking = await bookings.get_booking(session, booking_id)
    if not booking:
        raise HTTPException(404, detail="Booking not found")
    return booking


def _require_owner(account, booking):
    if booking.username != account.username:
        raise HTTPException(403, detail="Unauthorized to update this booking")


# -------------------------------------------------------------------
# CREATE
# -------------------------------------------------------------------
@router.post("/", response_model=RoomBookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: RoomBookingCreate,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await bookings.create_booking(session, current_account.username, data.model_dump())
    except BookingConflict as e:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# LIST
# -------------------------------------------------------------------
@router.get("/", response_model=List[RoomBookingRead])
async def list_bookings(
    request_from: Optional[str] = None,
    department: Optional[str] = None,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    # requesters only ever see their own bookings
    if AccountRole(current_account.role) == AccountRole.User:
        request_from = current_account.username

    return await bookings.list_bookings(session, username=request_from, department=department)


@router.get("/assigned", response_model=List[RoomBookingRead])
async def assigned_bookings(
    staff: Optional[str] = None,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    return await bookings.list_assigned(session, staff or current_account.name)


@router.get("/staff-all", response_model=List[RoomBookingRead])
async def staff_all_bookings(
    username: Optional[str] = None,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    if not username:
        raise HTTPException(400, detail="Username required")

    # assignments are stored by display name
    staff_name = current_account.name if username == current_account.username else None
    return await bookings.list_related(session, username, staff_name)


# -------------------------------------------------------------------
# STATUS (requesting user only)
# -------------------------------------------------------------------
@router.put("/update-status/{booking_id}", response_model=RoomBookingRead)
async def update_status(
    booking_id: UUID,
    data: BookingStatusUpdate,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)
    _require_owner(current_account, booking)

    try:
        return await bookings.set_status(session, booking, data.status)
    except BookingConflict as e:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(e))


# -------------------------------------------------------------------
# ASSIGN STAFF (admin)
# -------------------------------------------------------------------
@router.put("/{booking_id}/assign-staff", response_model=RoomBookingRead)
async def assign_staff(
    booking_id: UUID,
    data: AssignBookingStaffRequest,
    background_tasks: BackgroundTasks,
    _=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)
    booking = await bookings.assign_staff(session, booking, data.staff_name)

    staff = await get_staff_by_name(session, data.staff_name)
    if staff and staff.email:
        background_tasks.add_task(
            email_service.send_booking_assigned_email,
            bookings.mail_context(booking),
            {"name": staff.name, "email": staff.email},
        )

    return booking


# -------------------------------------------------------------------
# EDIT (admin or owner)
# -------------------------------------------------------------------
@router.put("/{booking_id}", response_model=RoomBookingRead)
async def update_booking(
    booking_id: UUID,
    data: RoomBookingUpdate,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)
    if not is_admin(current_account):
        _require_owner(current_account, booking)

    try:
        return await bookings.update_booking(session, booking, data.model_dump(exclude_unset=True))
    except BookingConflict as e:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# REMARKS
# -------------------------------------------------------------------
@router.post("/{booking_id}/admin-remarks", response_model=RoomBookingRead)
async def admin_remarks(
    booking_id: UUID,
    data: BookingRemarksRequest,
    _=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)
    return await bookings.set_admin_remarks(session, booking, data.remarks)


@router.post("/{booking_id}/user-remarks", response_model=RoomBookingRead)
async def user_remarks(
    booking_id: UUID,
    data: BookingRemarksRequest,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)
    _require_owner(current_account, booking)
    return await bookings.set_user_remarks(session, booking, data.remarks)


# -------------------------------------------------------------------
# CONFIRM (admin) → Booked
# -------------------------------------------------------------------
@router.put("/{booking_id}/confirm", response_model=RoomBookingRead)
async def confirm_booking(
    booking_id: UUID,
    _=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await _load(session, booking_id)

    try:
        return await bookings.set_status(session, booking, BookingStatus.Booked)
    except BookingConflict as e:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(e))
