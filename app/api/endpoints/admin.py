# app/api/endpoints/admin.py

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.rbac import require_admin
from app.schemas.dashboard import RepairSummary, StaffWorkload, RoomRequestCount, TestMailRequest
from app.schemas.user import UserCreate, UserRead
from app.services import dashboard_service
from app.services.auth_service import create_user, list_users, delete_user_by_id
from app.services.email_service import send_test_email

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


# ===================================================================
# DASHBOARD
# ===================================================================
@router.get("/repair-summary", response_model=RepairSummary)
async def repair_summary(session: AsyncSession = Depends(get_db_session)):
    return await dashboard_service.repair_summary(session)


@router.get("/repair-staff-summary", response_model=List[StaffWorkload])
async def repair_staff_summary(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    session: AsyncSession = Depends(get_db_session),
):
    return await dashboard_service.staff_workload(session, date_from, date_to)


@router.get("/room-requests", response_model=List[RoomRequestCount])
async def room_requests(session: AsyncSession = Depends(get_db_session)):
    return await dashboard_service.pending_room_requests(session)


# ===================================================================
# REQUESTER ACCOUNTS
# ===================================================================
@router.get("/users", response_model=List[UserRead])
async def get_users(session: AsyncSession = Depends(get_db_session)):
    return await list_users(session)


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def add_user(data: UserCreate, session: AsyncSession = Depends(get_db_session)):
    try:
        return await create_user(
            session,
            username=data.username,
            password=data.password,
            name=data.name,
            department=data.department,
            email=data.email,
            phone=data.phone,
        )
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


@router.delete("/users/{user_id}", status_code=204)
async def remove_user(user_id: UUID, session: AsyncSession = Depends(get_db_session)):
    try:
        await delete_user_by_id(session, user_id)
    except ValueError as e:
        raise HTTPException(404, detail=str(e))
    return None


# ===================================================================
# SMTP CHECK
# ===================================================================
@router.post("/send-test-mail")
async def send_test_mail(data: TestMailRequest):
    try:
        await run_in_threadpool(send_test_email, data.to)
    except Exception as e:
        logger.error(f"Test mail to {data.to} failed: {e}")
        raise HTTPException(500, detail=str(e))

    return {"detail": f"Test email sent to {data.to}"}
