# app/schemas/gate_pass.py
from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, StringConstraints, field_validator

from app.models.enums import GatePassType

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _require_items(v):
    if v is not None and len(v) == 0:
        raise ValueError("At least one item is required")
    return v


class GatePassCreate(BaseModel):
    date: datetime
    type: GatePassType
    department: str = ""
    issued_to: NonEmptyStr
    purpose: NonEmptyStr
    vehicle_type: str = ""
    vehicle_reg_no: str = ""
    items: List[str]

    @field_validator("items")
    @classmethod
    def validate_items(cls, v):
        return _require_items(v)


class GatePassUpdate(BaseModel):
    date: Optional[datetime] = None
    type: Optional[GatePassType] = None
    department: Optional[str] = None
    issued_to: Optional[NonEmptyStr] = None
    purpose: Optional[NonEmptyStr] = None
    vehicle_type: Optional[str] = None
    vehicle_reg_no: Optional[str] = None
    items: Optional[List[str]] = None

    @field_validator("items")
    @classmethod
    def validate_items(cls, v):
        return _require_items(v)


class GatePassRead(BaseModel):
    id: UUID
    date: datetime
    type: GatePassType
    department: str
    issued_to: str
    purpose: str
    vehicle_type: str
    vehicle_reg_no: str
    items: List[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
