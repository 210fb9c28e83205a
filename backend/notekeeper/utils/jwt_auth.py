from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from notekeeper.core import config
from notekeeper.core.exceptions import UnauthenticatedError

bearer = HTTPBearer(auto_error=False)


def create_access_token(subject: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=config.jwt_exp_minutes())
    payload = {"sub": subject, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, config.jwt_secret(), algorithm=config.jwt_algorithm())


def decode_token(token: str) -> dict:
    return jwt.decode(token, config.jwt_secret(), algorithms=[config.jwt_algorithm()])


def verify_token(token: str) -> str:
    """Return the identity carried by ``token`` or raise ``UnauthenticatedError``."""
    try:
        payload = decode_token(token)
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token") from None
    sub = payload.get("sub")
    if not sub:
        raise UnauthenticatedError("Invalid token")
    return str(sub)


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> str:
    if creds is None or creds.scheme.lower() != "bearer":
        raise UnauthenticatedError("Token is required")
    return verify_token(creds.credentials)
