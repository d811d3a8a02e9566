"""FastAPI dependency: bearer token auth."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from employee_manager.application.services.auth_service import AuthService
from employee_manager.domain.models.user import User
from employee_manager.interfaces.deps import get_auth_service

# auto_error=False so a missing header yields our 401 body instead of Starlette's 403
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> str:
    """Validate the bearer token; runs before any store access."""
    token = credentials.credentials if credentials else None
    return auth.verify(token)


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Load the token's user from the store."""
    return await auth.current_user(user_id)
