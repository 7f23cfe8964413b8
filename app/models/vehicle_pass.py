# app/models/vehicle_pass.py

from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

from app.models.columns import utc_now, utc_column


class VehiclePass(SQLModel, table=True):
    __tablename__ = "vehicle_passes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    pass_no: str = Field(nullable=False, index=True, unique=True)
    date: datetime = Field(sa_column=utc_column())
    staff_code: str = Field(nullable=False)
    issued_to: str = Field(nullable=False)
    class_or_dept: str = Field(nullable=False)
    rc_owner: str = Field(nullable=False)
    rc_no: str = Field(default="")
    vehicle_reg: str = Field(nullable=False)
    vehicle_type: str = Field(nullable=False)
    license_no: str = Field(default="")
    authorization: str = Field(nullable=False)
    remarks: str = Field(default="")

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
