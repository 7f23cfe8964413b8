# app/models/repair_request.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text, String
from sqlalchemy import Enum as SAEnum
from datetime import datetime
from typing import Optional
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import RepairStatus


class RepairRequest(SQLModel, table=True):
    __tablename__ = "repair_requests"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # requester snapshot (taken from the account at creation time)
    username: str = Field(nullable=False, index=True)
    department: str = Field(nullable=False)
    email: Optional[str] = Field(default=None)
    mobile: Optional[str] = Field(default=None)
    role: str = Field(nullable=False)

    description: str = Field(sa_column=Column(Text, nullable=False))
    is_new_requirement: bool = Field(default=False)
    file_url: str = Field(default="")

    status: RepairStatus = Field(
        default=RepairStatus.Pending,
        sa_column=Column(SAEnum(RepairStatus, name="repair_status"), nullable=False, index=True)
    )

    # staff *name*, "" while unassigned
    assigned_to: str = Field(default="", sa_column=Column(String, nullable=False, default="", index=True))

    is_verified: bool = Field(default=False)
    verified_by: Optional[str] = Field(default=None)
    verified_at: Optional[datetime] = Field(default=None, sa_column=utc_column(nullable=True))
    completed_at: Optional[datetime] = Field(default=None, sa_column=utc_column(nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column(index=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())


class RepairRemark(SQLModel, table=True):
    __tablename__ = "repair_remarks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    request_id: uuid.UUID = Field(foreign_key="repair_requests.id", nullable=False, index=True)

    text: str = Field(sa_column=Column(Text, nullable=False))
    entered_by: str = Field(nullable=False)
    date: datetime = Field(default_factory=utc_now, sa_column=utc_column())

    is_verified: bool = Field(default=False)
    verified_by: Optional[str] = Field(default=None)
    verified_at: Optional[datetime] = Field(default=None, sa_column=utc_column(nullable=True))

    seen: bool = Field(default=False)
