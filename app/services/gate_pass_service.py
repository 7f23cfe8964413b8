# app/services/gate_pass_service.py

from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.columns import utc_now
from app.models.gate_pass import GatePass


async def create_gate_pass(session: AsyncSession, data: dict) -> GatePass:
    gate_pass = GatePass(**data)
    session.add(gate_pass)
    await session.commit()
    await session.refresh(gate_pass)
    return gate_pass


async def list_gate_passes(session: AsyncSession) -> list[GatePass]:
    result = await session.execute(select(GatePass).order_by(GatePass.created_at.desc()))
    return result.scalars().all()


async def get_gate_pass(session: AsyncSession, pass_id: UUID) -> GatePass | None:
    return await session.get(GatePass, pass_id)


async def update_gate_pass(session: AsyncSession, gate_pass: GatePass, changes: dict) -> GatePass:
    for field, value in changes.items():
        if value is not None:
            setattr(gate_pass, field, value)

    gate_pass.updated_at = utc_now()
    session.add(gate_pass)
    await session.commit()
    await session.refresh(gate_pass)
    return gate_pass
