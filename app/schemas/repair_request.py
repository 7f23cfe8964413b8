# app/schemas/repair_request.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr

from app.models.enums import RepairStatus


# ------------------------------------------------------------
# REMARKS
# ------------------------------------------------------------
class RemarkCreate(BaseModel):
    text: str


class RemarkRead(BaseModel):
    id: UUID
    request_id: UUID
    text: str
    entered_by: str
    date: datetime
    is_verified: bool = False
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    seen: bool = False

    class Config:
        from_attributes = True


class RemarkFeedItem(BaseModel):
    """Flattened remark used by the admin notification feed."""
    request_id: UUID
    remark_id: UUID
    username: str
    department: str
    text: str
    entered_by: str
    date: datetime
    seen: bool


# ------------------------------------------------------------
# REPAIR REQUEST
# ------------------------------------------------------------
class RepairRequestRead(BaseModel):
    id: UUID
    username: str
    department: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    role: str
    description: str
    is_new_requirement: bool
    file_url: str
    status: RepairStatus
    assigned_to: str
    is_verified: bool
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    remarks: List[RemarkRead] = []

    class Config:
        from_attributes = True


class RepairRequestUpdate(BaseModel):
    """Admin edit. status / assigned_to go through the status progression."""
    department: Optional[str] = None
    email: Optional[EmailStr] = None
    mobile: Optional[str] = None
    description: Optional[str] = None
    is_new_requirement: Optional[bool] = None
    status: Optional[RepairStatus] = None
    assigned_to: Optional[str] = None


class AssignStaffRequest(BaseModel):
    staff_name: str
