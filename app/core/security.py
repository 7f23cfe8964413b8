# app/core/security.py
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"
BCRYPT_MAX_BYTES = 72


# ---------------------------------------------------------
# PASSWORDS
# ---------------------------------------------------------
def _bcrypt_input(password: str) -> str:
    """
    bcrypt only reads the first 72 bytes, so longer passwords are
    reduced to their SHA-256 hexdigest (64 chars) first.
    """
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return password
    return hashlib.sha256(raw).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_bcrypt_input(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_bcrypt_input(plain_password), hashed_password)


# ---------------------------------------------------------
# ACCESS TOKENS
# sub = account id, role picks the account table, username is for the UI
# ---------------------------------------------------------
def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    data: Optional[dict] = None,
) -> str:
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {**(data or {}), "sub": str(subject), "iat": issued, "nbf": issued, "exp": issued + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    # raises jwt.InvalidTokenError (ExpiredSignatureError included)
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
