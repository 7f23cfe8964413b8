# app/models/staff.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Enum as SAEnum
from datetime import datetime
from typing import Optional
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import AccountRole


class Staff(SQLModel, table=True):
    __tablename__ = "staff"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    username: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(nullable=False, index=True, unique=True)
    department: str = Field(nullable=False)

    # optional, but unique when given (NULLs never collide)
    email: Optional[str] = Field(default=None, unique=True)
    phone: Optional[str] = Field(default=None)

    role: AccountRole = Field(
        default=AccountRole.Staff,
        sa_column=Column(SAEnum(AccountRole, name="account_role"), nullable=False)
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
