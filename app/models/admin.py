# app/models/admin.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Enum as SAEnum
from datetime import datetime
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import AccountRole


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    username: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(nullable=False)
    phone: str = Field(default="")
    department: str = Field(nullable=False)
    email: str = Field(default="")

    role: AccountRole = Field(
        default=AccountRole.Admin,
        sa_column=Column(SAEnum(AccountRole, name="account_role"), nullable=False)
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
