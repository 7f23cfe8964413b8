# app/api/deps.py

from typing import AsyncGenerator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token
from app.core.database import get_session
from app.services.auth_service import Account, get_account_by_id


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=True)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Get current logged-in account (admin / staff / user) from JWT
# ------------------------------------------------------------
async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> Account:

    token = credentials.credentials

    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    account_id = payload.get("sub")
    role = payload.get("role")
    if not account_id or not role:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token payload")

    account = await get_account_by_id(session, role, account_id)
    if not account:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")

    return account
