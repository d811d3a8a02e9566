"""Auth service: JWT token management and password hashing."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from employee_manager.config import Settings
from employee_manager.core.exceptions import ConflictError, InvalidCredentialsError, UnauthenticatedError
from employee_manager.domain.models.user import User
from employee_manager.domain.repositories.user_repository import UserRepository
from employee_manager.domain.validation import validate_login, validate_signup

logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(days=7),
) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {"sub": user_id, "iat": now, "exp": now + expires_delta}
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Optional[dict]:
    """Returns None for bad signatures, malformed tokens and expired tokens alike."""
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None


@dataclass
class AuthResult:
    token: str
    user: User


class AuthService:
    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.settings = settings

    def issue_token(self, user: User) -> str:
        return create_access_token(
            user.id,
            self.settings.SECRET_KEY,
            algorithm=self.settings.JWT_ALGORITHM,
            expires_delta=timedelta(days=self.settings.JWT_EXPIRATION_DAYS),
        )

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        data = validate_signup({"username": username, "email": email, "password": password})

        existing = await self.users.get_by_username_or_email(data.username, data.email)
        if existing:
            raise ConflictError("User already exists with this email or username")

        # bcrypt is CPU-bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, data.password)
        user = await self.users.create(
            User(username=data.username, email=data.email, password_hash=password_hash)
        )
        logger.info("User registered", user_id=user.id, username=user.username)
        return AuthResult(token=self.issue_token(user), user=user)

    async def authenticate(self, email: str, password: str) -> AuthResult:
        data = validate_login({"email": email, "password": password})

        user = await self.users.get_by_email(data.email)
        if user is None or not await asyncio.to_thread(verify_password, data.password, user.password_hash):
            logger.info("Login rejected", email=data.email)
            raise InvalidCredentialsError()

        logger.info("User logged in", user_id=user.id)
        return AuthResult(token=self.issue_token(user), user=user)

    def verify(self, token: Optional[str]) -> str:
        """Return the user id a token was issued for; no store access."""
        if not token:
            raise UnauthenticatedError()
        payload = decode_access_token(token, self.settings.SECRET_KEY, self.settings.JWT_ALGORITHM)
        if payload is None:
            raise UnauthenticatedError("Token is not valid")
        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise UnauthenticatedError("Token is not valid")
        return user_id

    async def current_user(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UnauthenticatedError("User no longer exists")
        return user
