# app/api/endpoints/gatepass.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.rbac import require_office
from app.schemas.gate_pass import GatePassCreate, GatePassUpdate, GatePassRead
from app.services.gate_pass_service import (
    create_gate_pass,
    list_gate_passes,
    get_gate_pass,
    update_gate_pass,
)

router = APIRouter(
    prefix="/api/gatepass",
    tags=["Gate Pass"],
    dependencies=[Depends(require_office)],
)


@router.post("/", response_model=GatePassRead, status_code=status.HTTP_201_CREATED)
async def create(data: GatePassCreate, session: AsyncSession = Depends(get_db_session)):
    return await create_gate_pass(session, data.model_dump())


@router.get("/", response_model=List[GatePassRead])
async def list_all(session: AsyncSession = Depends(get_db_session)):
    return await list_gate_passes(session)


@router.get("/{pass_id}", response_model=GatePassRead)
async def get_one(pass_id: UUID, session: AsyncSession = Depends(get_db_session)):
    gate_pass = await get_gate_pass(session, pass_id)
    if not gate_pass:
        raise HTTPException(404, detail="Gate Pass not found")
    return gate_pass


@router.put("/{pass_id}", response_model=GatePassRead)
async def update(pass_id: UUID, data: GatePassUpdate, session: AsyncSession = Depends(get_db_session)):
    gate_pass = await get_gate_pass(session, pass_id)
    if not gate_pass:
        raise HTTPException(404, detail="Gate Pass not found")
    return await update_gate_pass(session, gate_pass, data.model_dump(exclude_unset=True))
