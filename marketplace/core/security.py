"""Bearer token helpers."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from marketplace.core.config import SecuritySettings
from marketplace.core.errors import AuthenticationError
from marketplace.modules.users import User
from marketplace.schemas import TokenData


def create_access_token(user: User, settings: SecuritySettings, expires_delta: Optional[timedelta] = None) -> str:
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: SecuritySettings) -> TokenData:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not all([user_id, email, role]):
        raise AuthenticationError("Invalid or expired token")
    return TokenData(user_id=user_id, email=email, role=role)


__all__ = ["create_access_token", "decode_access_token"]
