from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from app.models.enums import AccountRole


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    username: str
    password: str


# -------------------------------------------------------------------
# LOGIN RESPONSE (token + profile, one shape for every role)
# -------------------------------------------------------------------
class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None

    role: AccountRole
    user_id: UUID
    username: str
    name: str
    department: str
    email: Optional[str] = None
    phone: Optional[str] = None


# -------------------------------------------------------------------
# PASSWORD RESET
# -------------------------------------------------------------------
class ResetPasswordRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


# -------------------------------------------------------------------
# TOKEN VERIFY
# -------------------------------------------------------------------
class VerifyResponse(BaseModel):
    valid: bool
    role: Optional[AccountRole] = None
    username: Optional[str] = None


# -------------------------------------------------------------------
# CURRENT ACCOUNT
# -------------------------------------------------------------------
class AccountRead(BaseModel):
    id: UUID
    role: AccountRole
    username: str
    name: str
    department: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True
