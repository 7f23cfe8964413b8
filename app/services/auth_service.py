# app/services/auth_service.py

from typing import Union
import uuid

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.models.admin import Admin
from app.models.enums import AccountRole
from app.models.staff import Staff
from app.models.user import User
from app.schemas.auth import LoginResponse

Account = Union[Admin, Staff, User]

# Login resolution order: admin, then user, then staff
ACCOUNT_MODELS = (Admin, User, Staff)

MODEL_BY_ROLE = {
    AccountRole.Admin: Admin,
    AccountRole.Staff: Staff,
    AccountRole.User: User,
}


# ============================================================================
# LOOKUPS
# ============================================================================
async def get_account_by_username(session: AsyncSession, username: str) -> Account | None:
    for model in ACCOUNT_MODELS:
        result = await session.execute(select(model).where(model.username == username))
        account = result.scalar_one_or_none()
        if account:
            return account
    return None


async def get_account_by_id(session: AsyncSession, role: AccountRole | str, account_id) -> Account | None:
    try:
        model = MODEL_BY_ROLE[AccountRole(role)]
    except ValueError:
        return None

    if not isinstance(account_id, uuid.UUID):
        try:
            account_id = uuid.UUID(str(account_id))
        except ValueError:
            return None

    return await session.get(model, account_id)


async def username_taken(session: AsyncSession, username: str) -> bool:
    return await get_account_by_username(session, username) is not None


# ============================================================================
# AUTHENTICATE (any role)
# ============================================================================
async def authenticate_account(session: AsyncSession, username: str, password: str) -> Account | None:
    account = await get_account_by_username(session, username)
    if not account:
        return None

    if not verify_password(password, account.password_hash):
        return None

    return account


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def create_login_response(account: Account) -> LoginResponse:
    role = AccountRole(account.role)

    token = create_access_token(
        subject=str(account.id),
        data={"role": role.value, "username": account.username},
    )

    return LoginResponse(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        role=role,
        user_id=account.id,
        username=account.username,
        name=account.name,
        department=account.department,
        email=account.email,
        phone=account.phone,
    )


# ============================================================================
# PASSWORD RESET
# ============================================================================
async def reset_password(session: AsyncSession, username: str, new_password: str) -> Account:
    account = await get_account_by_username(session, username)
    if not account:
        raise ValueError("User not found")

    account.password_hash = hash_password(new_password)
    session.add(account)
    await session.commit()

    logger.info(f"Password reset for {account.role.value} '{username}'")
    return account


# ============================================================================
# REQUESTER ACCOUNTS (role = user)
# ============================================================================
async def create_user(
    session: AsyncSession,
    username: str,
    password: str,
    name: str,
    department: str,
    email: str,
    phone: str,
) -> User:

    if await username_taken(session, username):
        raise ValueError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        name=name,
        department=department,
        email=email,
        phone=phone,
    )
    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("User with this username or email already exists")


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at.desc()))
    return result.scalars().all()


async def delete_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> None:
    user = await session.get(User, user_id)
    if not user:
        raise ValueError("User not found")

    await session.delete(user)
    await session.commit()


# ============================================================================
# ADMIN SEEDING
# ============================================================================
async def get_admin_by_username(session: AsyncSession, username: str) -> Admin | None:
    result = await session.execute(select(Admin).where(Admin.username == username))
    return result.scalar_one_or_none()


async def create_admin(
    session: AsyncSession,
    username: str,
    password: str,
    name: str,
    department: str,
    phone: str = "",
    email: str = "",
) -> Admin:

    if await username_taken(session, username):
        raise ValueError("Username already exists")

    admin = Admin(
        username=username,
        password_hash=hash_password(password),
        name=name,
        phone=phone,
        department=department,
        email=email,
    )
    session.add(admin)

    try:
        await session.commit()
        await session.refresh(admin)
        return admin

    except IntegrityError:
        await session.rollback()
        raise ValueError("Admin with this username already exists")
