# app/api/endpoints/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_current_account
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.core.rbac import is_admin
from app.core.security import decode_token
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    VerifyResponse,
    AccountRead,
)
from app.services.auth_service import (
    authenticate_account,
    create_login_response,
    get_account_by_id,
    reset_password,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

optional_bearer = HTTPBearer(auto_error=False)


# -------------------------------------------------------------------
# LOGIN (admin → user → staff)
# -------------------------------------------------------------------
@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    account = await authenticate_account(session, payload.username, payload.password)

    if not account:
        logger.warning(f"Failed login for '{payload.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return create_login_response(account)


# -------------------------------------------------------------------
# RESET PASSWORD
# -------------------------------------------------------------------
@router.put("/reset-password")
async def reset_password_endpoint(
    payload: ResetPasswordRequest,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    if not payload.username or not payload.password:
        raise HTTPException(400, detail="Username and password are required")

    # non-admins may only reset their own password
    if not is_admin(current_account) and payload.username != current_account.username:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="You can only reset your own password")

    try:
        account = await reset_password(session, payload.username, payload.password)
    except ValueError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"detail": f"{account.role.value.capitalize()} password updated"}


# -------------------------------------------------------------------
# VERIFY TOKEN (used by the frontend on every page load)
# -------------------------------------------------------------------
@router.get("/verify", response_model=VerifyResponse)
async def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
    session: AsyncSession = Depends(get_db_session),
):
    invalid = JSONResponse(status_code=401, content={"valid": False})

    if not credentials:
        return invalid

    try:
        payload = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        return invalid

    account = await get_account_by_id(session, payload.get("role", ""), payload.get("sub"))
    if not account:
        return invalid

    return VerifyResponse(valid=True, role=account.role, username=account.username)


# -------------------------------------------------------------------
# CURRENT ACCOUNT
# -------------------------------------------------------------------
@router.get("/me", response_model=AccountRead)
async def me(current_account=Depends(get_current_account)):
    return current_account
