from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr


# ---------------------------------------------------------
# CREATE STAFF
# Required fields are checked in the endpoint so blanks give
# "All fields are required" instead of a schema error.
# ---------------------------------------------------------
class StaffCreate(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    department: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


# ---------------------------------------------------------
# UPDATE STAFF (Admin edits)
# ---------------------------------------------------------
class StaffUpdate(BaseModel):
    name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = None


# ---------------------------------------------------------
# READ STAFF (response)
# ---------------------------------------------------------
class StaffRead(BaseModel):
    id: UUID
    username: str
    name: str
    department: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
