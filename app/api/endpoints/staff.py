# app/api/endpoints/staff.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_current_account
from app.core.rbac import require_admin
from app.schemas.staff import StaffCreate, StaffUpdate, StaffRead
from app.services.staff_service import (
    create_staff,
    list_staff,
    get_staff_by_id,
    update_staff,
    delete_staff,
)

router = APIRouter(prefix="/api/staff", tags=["Staff"])


# -------------------------------------------------------------------
# ADD STAFF (Admin only)
# -------------------------------------------------------------------
@router.post("/add", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
async def add_staff(
    data: StaffCreate,
    session: AsyncSession = Depends(get_db_session),
    _=Depends(require_admin),
):
    required = (data.name, data.username, data.password, data.department)
    if not all(value and value.strip() for value in required):
        raise HTTPException(400, detail="All fields are required")

    try:
        return await create_staff(
            session,
            name=data.name.strip(),
            username=data.username.strip(),
            password=data.password,
            department=data.department.strip(),
            email=data.email,
            phone=data.phone,
        )
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# LIST STAFF (newest first)
# -------------------------------------------------------------------
@router.get("/", response_model=List[StaffRead])
async def get_all_staff(
    session: AsyncSession = Depends(get_db_session),
    _=Depends(get_current_account),
):
    return await list_staff(session)


@router.get("/{staff_id}", response_model=StaffRead)
async def get_staff(
    staff_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _=Depends(get_current_account),
):
    staff = await get_staff_by_id(session, staff_id)
    if not staff:
        raise HTTPException(404, detail="Staff not found")
    return staff


@router.put("/{staff_id}", response_model=StaffRead)
async def edit_staff(
    staff_id: UUID,
    data: StaffUpdate,
    session: AsyncSession = Depends(get_db_session),
    _=Depends(require_admin),
):
    staff = await get_staff_by_id(session, staff_id)
    if not staff:
        raise HTTPException(404, detail="Staff not found")

    try:
        return await update_staff(session, staff, **data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


@router.delete("/{staff_id}", status_code=204)
async def remove_staff(
    staff_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _=Depends(require_admin),
):
    staff = await get_staff_by_id(session, staff_id)
    if not staff:
        raise HTTPException(404, detail="Staff not found")

    await delete_staff(session, staff)
    return None
