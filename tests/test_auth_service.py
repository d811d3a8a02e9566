"""Unit tests for AuthService and the token helpers."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from jose import jwt

from employee_manager.application.services.auth_service import (
    AuthService,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from employee_manager.core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from employee_manager.domain.models.user import User


@pytest.fixture
def users():
    repo = AsyncMock()
    repo.get_by_username_or_email.return_value = None
    repo.get_by_email.return_value = None
    repo.create.side_effect = lambda user: User(
        id="65f000000000000000000001",
        username=user.username,
        email=user.email,
        password_hash=user.password_hash,
    )
    return repo


@pytest.fixture
def auth(users, settings):
    return AuthService(users, settings)


def test_password_hashing():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_token_carries_user_id_and_seven_day_expiry():
    token = create_access_token("abc", "k")
    payload = jwt.decode(token, "k", algorithms=["HS256"])
    assert payload["sub"] == "abc"
    assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())


def test_decode_rejects_foreign_signatures():
    assert decode_access_token(create_access_token("abc", "k"), "other") is None
    assert decode_access_token("garbage", "k") is None


async def test_register(auth, users, settings):
    result = await auth.register("alice123", "Alice@X.com", "secret1")

    assert result.user.email == "alice@x.com"
    assert auth.verify(result.token) == result.user.id
    users.get_by_username_or_email.assert_awaited_once_with("alice123", "alice@x.com")
    stored = users.create.call_args.args[0]
    assert verify_password("secret1", stored.password_hash)


async def test_register_existing_user(auth, users):
    users.get_by_username_or_email.return_value = User(username="alice123", email="a@x.com", password_hash="h")

    with pytest.raises(ConflictError):
        await auth.register("alice123", "alice@x.com", "secret1")
    users.create.assert_not_awaited()


async def test_register_validates_before_touching_the_store(auth, users):
    with pytest.raises(ValidationError):
        await auth.register("al", "alice@x.com", "secret1")
    users.get_by_username_or_email.assert_not_awaited()


async def test_authenticate(auth, users):
    users.get_by_email.return_value = User(
        id="65f000000000000000000001", username="alice123", email="alice@x.com",
        password_hash=hash_password("secret1"),
    )

    result = await auth.authenticate("alice@x.com", "secret1")

    assert result.user.username == "alice123"
    assert result.token


async def test_authenticate_wrong_password(auth, users):
    users.get_by_email.return_value = User(
        id="65f000000000000000000001", username="alice123", email="alice@x.com",
        password_hash=hash_password("secret1"),
    )

    with pytest.raises(InvalidCredentialsError):
        await auth.authenticate("alice@x.com", "nope-nope")


async def test_authenticate_unknown_user(auth):
    with pytest.raises(InvalidCredentialsError):
        await auth.authenticate("ghost@x.com", "secret1")


@pytest.mark.parametrize("token", [None, "", "not.a.jwt"])
def test_verify_rejects_bad_tokens(auth, token):
    with pytest.raises(UnauthenticatedError):
        auth.verify(token)


def test_verify_rejects_tokens_without_subject(auth, settings):
    token = jwt.encode({"foo": "bar"}, settings.SECRET_KEY, algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        auth.verify(token)


async def test_current_user_gone(auth, users):
    users.get_by_id.return_value = None
    with pytest.raises(UnauthenticatedError):
        await auth.current_user("65f000000000000000000001")
