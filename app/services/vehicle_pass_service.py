# app/services/vehicle_pass_service.py

from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.models.columns import utc_now
from app.models.vehicle_pass import VehiclePass


async def _commit(session: AsyncSession, vehicle_pass: VehiclePass) -> VehiclePass:
    pass_no = vehicle_pass.pass_no  # read before a rollback expires the instance
    session.add(vehicle_pass)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError(f"Pass number '{pass_no}' already exists")

    await session.refresh(vehicle_pass)
    return vehicle_pass


async def create_vehicle_pass(session: AsyncSession, data: dict) -> VehiclePass:
    return await _commit(session, VehiclePass(**data))


async def list_vehicle_passes(session: AsyncSession) -> list[VehiclePass]:
    result = await session.execute(select(VehiclePass).order_by(VehiclePass.created_at.desc()))
    return result.scalars().all()


async def get_vehicle_pass(session: AsyncSession, pass_id: UUID) -> VehiclePass | None:
    return await session.get(VehiclePass, pass_id)


async def update_vehicle_pass(session: AsyncSession, vehicle_pass: VehiclePass, changes: dict) -> VehiclePass:
    for field, value in changes.items():
        if value is not None:
            setattr(vehicle_pass, field, value)

    vehicle_pass.updated_at = utc_now()
    return await _commit(session, vehicle_pass)
