"""Authentication dependencies resolving the calling user."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from marketplace.core.container import ApplicationContainer
from marketplace.core.errors import AuthenticationError, ForbiddenError
from marketplace.core.security import decode_access_token
from marketplace.modules.users import User, UserNotFoundError, UserService

from .database import get_container
from .services import get_user_service

security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    container: ApplicationContainer = Depends(get_container),
    service: UserService = Depends(get_user_service),
) -> Optional[User]:
    if credentials is None:
        return None
    token_data = decode_access_token(credentials.credentials, container.settings.security)
    try:
        return await service.get_user(token_data.user_id)
    except UserNotFoundError as exc:
        raise AuthenticationError("Account no longer exists") from exc


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError()
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin():
        raise ForbiddenError("Administrator privileges required")
    return user


__all__ = ["get_current_admin", "get_current_user", "get_optional_user"]
