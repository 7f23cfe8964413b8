# app/models/room_booking.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Text
from sqlalchemy import Enum as SAEnum
from datetime import datetime
from typing import List, Optional
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import BookingStatus


class RoomBooking(SQLModel, table=True):
    __tablename__ = "room_bookings"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    username: str = Field(nullable=False, index=True)  # requesting account
    department: str = Field(nullable=False)
    mobile_number: str = Field(nullable=False)

    room_type: str = Field(nullable=False, index=True)
    date: str = Field(nullable=False, index=True)      # YYYY-MM-DD
    time_from: str = Field(nullable=False)             # HH:MM
    time_to: str = Field(nullable=False)               # HH:MM
    purpose: str = Field(sa_column=Column(Text, nullable=False))

    facilities: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tables_with_cloth: int = Field(default=0)
    tables_without_cloth: int = Field(default=0)
    executive_chairs: int = Field(default=0)
    participant_chairs: int = Field(default=0)
    additional_chairs: int = Field(default=0)

    remarks: Optional[str] = Field(default=None)
    agreed: bool = Field(nullable=False)

    assigned_staff: Optional[str] = Field(default=None, index=True)  # staff name
    status: BookingStatus = Field(
        default=BookingStatus.Pending,
        sa_column=Column(SAEnum(BookingStatus, name="booking_status"), nullable=False, index=True)
    )

    admin_remarks: Optional[str] = Field(default=None)
    user_remarks: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
