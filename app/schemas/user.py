from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, EmailStr


# ---------------------------------------------------------
# CREATE USER (Admin creates requester accounts)
# ---------------------------------------------------------
class UserCreate(BaseModel):
    username: str
    password: str
    name: str
    department: str
    email: EmailStr
    phone: str


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(BaseModel):
    id: UUID
    username: str
    name: str
    department: str
    email: str
    phone: str
    created_at: datetime

    class Config:
        from_attributes = True
