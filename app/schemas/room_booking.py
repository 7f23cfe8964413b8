# app/schemas/room_booking.py
from datetime import date as date_type, datetime, time
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from app.models.enums import BookingStatus


def _check_date(v: Optional[str]) -> Optional[str]:
    # stored as YYYY-MM-DD
    if v is None:
        return v
    return date_type.fromisoformat(v).isoformat()


def _check_time(v: Optional[str]) -> Optional[str]:
    # stored as HH:MM
    if v is None:
        return v
    return time.fromisoformat(v).strftime("%H:%M")


class RoomBookingCreate(BaseModel):
    department: str
    mobile_number: str
    room_type: str
    date: str
    time_from: str
    time_to: str
    purpose: str
    facilities: List[str] = []
    tables_with_cloth: int = 0
    tables_without_cloth: int = 0
    executive_chairs: int = 0
    participant_chairs: int = 0
    additional_chairs: int = 0
    remarks: Optional[str] = None
    agreed: bool

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _check_date(v)

    @field_validator("time_from", "time_to")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)


class RoomBookingUpdate(BaseModel):
    department: Optional[str] = None
    mobile_number: Optional[str] = None
    room_type: Optional[str] = None
    date: Optional[str] = None
    time_from: Optional[str] = None
    time_to: Optional[str] = None
    purpose: Optional[str] = None
    facilities: Optional[List[str]] = None
    tables_with_cloth: Optional[int] = None
    tables_without_cloth: Optional[int] = None
    executive_chairs: Optional[int] = None
    participant_chairs: Optional[int] = None
    additional_chairs: Optional[int] = None
    remarks: Optional[str] = None
    agreed: Optional[bool] = None
    status: Optional[BookingStatus] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _check_date(v)

    @field_validator("time_from", "time_to")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)


class RoomBookingRead(BaseModel):
    id: UUID
    username: str
    department: str
    mobile_number: str
    room_type: str
    date: str
    time_from: str
    time_to: str
    purpose: str
    facilities: List[str]
    tables_with_cloth: int
    tables_without_cloth: int
    executive_chairs: int
    participant_chairs: int
    additional_chairs: int
    remarks: Optional[str] = None
    agreed: bool
    assigned_staff: Optional[str] = None
    status: BookingStatus
    admin_remarks: Optional[str] = None
    user_remarks: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssignBookingStaffRequest(BaseModel):
    staff_name: str


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingRemarksRequest(BaseModel):
    remarks: str
