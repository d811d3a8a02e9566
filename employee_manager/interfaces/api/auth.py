"""Auth API routes: signup, login, me."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status

from employee_manager.application.services.auth_service import AuthResult, AuthService
from employee_manager.domain.models.user import User
from employee_manager.domain.schemas.auth import TokenResponse, UserRead
from employee_manager.interfaces.api.deps import get_current_user
from employee_manager.interfaces.deps import get_auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_response(message: str, result: AuthResult) -> TokenResponse:
    return TokenResponse(
        message=message,
        token=result.token,
        user=UserRead.model_validate(result.user),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: Optional[Dict[str, Any]] = Body(None),
    auth: AuthService = Depends(get_auth_service),
):
    body = body or {}
    result = await auth.register(body.get("username"), body.get("email"), body.get("password"))
    return _token_response("User created successfully", result)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: Optional[Dict[str, Any]] = Body(None),
    auth: AuthService = Depends(get_auth_service),
):
    body = body or {}
    result = await auth.authenticate(body.get("email"), body.get("password"))
    return _token_response("Login successful", result)


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
