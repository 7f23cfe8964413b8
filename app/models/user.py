# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Enum as SAEnum
from datetime import datetime
import uuid

from app.models.columns import utc_now, utc_column
from app.models.enums import AccountRole


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    username: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(nullable=False)
    department: str = Field(nullable=False)
    email: str = Field(nullable=False, unique=True)
    phone: str = Field(nullable=False)

    role: AccountRole = Field(
        default=AccountRole.User,
        sa_column=Column(SAEnum(AccountRole, name="account_role"), nullable=False)
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
