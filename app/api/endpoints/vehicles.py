# app/api/endpoints/vehicles.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.rbac import require_office
from app.schemas.vehicle_pass import VehiclePassCreate, VehiclePassUpdate, VehiclePassRead
from app.services.vehicle_pass_service import (
    create_vehicle_pass,
    list_vehicle_passes,
    get_vehicle_pass,
    update_vehicle_pass,
)

router = APIRouter(
    prefix="/api/vehicles",
    tags=["Vehicle Pass"],
    dependencies=[Depends(require_office)],
)


@router.get("/", response_model=List[VehiclePassRead])
async def list_all(session: AsyncSession = Depends(get_db_session)):
    return await list_vehicle_passes(session)


@router.get("/{pass_id}", response_model=VehiclePassRead)
async def get_one(pass_id: UUID, session: AsyncSession = Depends(get_db_session)):
    vehicle_pass = await get_vehicle_pass(session, pass_id)
    if not vehicle_pass:
        raise HTTPException(404, detail="Pass not found")
    return vehicle_pass


@router.post("/", response_model=VehiclePassRead, status_code=status.HTTP_201_CREATED)
async def create(data: VehiclePassCreate, session: AsyncSession = Depends(get_db_session)):
    try:
        return await create_vehicle_pass(session, data.model_dump())
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


@router.put("/{pass_id}", response_model=VehiclePassRead)
async def update(pass_id: UUID, data: VehiclePassUpdate, session: AsyncSession = Depends(get_db_session)):
    vehicle_pass = await get_vehicle_pass(session, pass_id)
    if not vehicle_pass:
        raise HTTPException(404, detail="Pass not found")

    try:
        return await update_vehicle_pass(session, vehicle_pass, data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))
