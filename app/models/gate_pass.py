# app/models/gate_pass.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Text
from sqlalchemy import Enum as SAEnum
from datetime import datetime
from typing import List
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import GatePassType


class GatePass(SQLModel, table=True):
    __tablename__ = "gate_passes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    date: datetime = Field(sa_column=utc_column())
    type: GatePassType = Field(
        sa_column=Column(SAEnum(GatePassType, name="gate_pass_type"), nullable=False)
    )
    department: str = Field(default="")
    issued_to: str = Field(nullable=False)
    purpose: str = Field(sa_column=Column(Text, nullable=False))
    vehicle_type: str = Field(default="")
    vehicle_reg_no: str = Field(default="")

    items: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
