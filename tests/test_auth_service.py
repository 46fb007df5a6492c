"""Account and password reset service tests with fake collaborators."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import TestingSessionLocal

from src.config import Settings
from src.models.user import User
from src.services.auth import AuthService
from src.services.errors import (
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidDomainError,
    RegistrationFailedError,
)
from src.services.password_reset import INVALID_TOKEN_MESSAGE, PasswordResetService
from src.services.passwords import get_password_hash, verify_password
from src.services.user_store import UserStore

SETTINGS = Settings(
    jwt_secret="access-secret",
    refresh_secret="refresh-secret",
    password_reset_secret="reset-secret",
    bcrypt_rounds=4,
)


@pytest.fixture
def store(db):
    return UserStore(db)


@pytest.fixture
def mock_mailer():
    mailer = MagicMock()
    mailer.send_verification_email = AsyncMock()
    mailer.send_password_reset_email = AsyncMock()
    return mailer


@pytest.mark.asyncio
async def test_register_creates_unverified_student(store, mock_mailer):
    service = AuthService(store, mock_mailer, SETTINGS)
    user = await service.register("Alice@my.csun.edu", "Passw0rd!", "Alice", "Smith")

    assert user.email == "alice@my.csun.edu"
    assert user.is_verified is False
    assert user.user_type == "student"

    row = store.get_by_email("alice@my.csun.edu")
    assert row.password_hash != "Passw0rd!"
    mock_mailer.send_verification_email.assert_awaited_once_with("alice@my.csun.edu", row.verification_token)


@pytest.mark.asyncio
async def test_register_duplicate_is_case_insensitive(store, mock_mailer):
    service = AuthService(store, mock_mailer, SETTINGS)
    await service.register("alice@my.csun.edu", "Passw0rd!", "Alice", "Smith")

    with pytest.raises(DuplicateEmailError):
        await service.register("ALICE@my.csun.edu", "Passw0rd!", "Alice", "Smith")


@pytest.mark.asyncio
async def test_register_rejects_other_domains(store, mock_mailer):
    service = AuthService(store, mock_mailer, SETTINGS)
    with pytest.raises(InvalidDomainError):
        await service.register("alice@gmail.com", "Passw0rd!", "Alice", "Smith")
    mock_mailer.send_verification_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_register_rolls_back_when_mail_fails(store, mock_mailer):
    mock_mailer.send_verification_email.side_effect = ConnectionError("SMTP down")
    service = AuthService(store, mock_mailer, SETTINGS)

    with pytest.raises(RegistrationFailedError):
        await service.register("alice@my.csun.edu", "Passw0rd!", "Alice", "Smith")
    assert store.get_by_email("alice@my.csun.edu") is None


@pytest.mark.asyncio
async def test_login_checks_verification_first(store, mock_mailer):
    service = AuthService(store, mock_mailer, SETTINGS)
    await service.register("alice@my.csun.edu", "Passw0rd!", "Alice", "Smith")

    with pytest.raises(EmailNotVerifiedError):
        await service.login("alice@my.csun.edu", "wrong-password")


@pytest.mark.asyncio
async def test_confirm_reset_weak_password_does_not_touch_store(mock_mailer):
    store = MagicMock()
    service = PasswordResetService(store, mock_mailer, SETTINGS)

    result = await service.confirm_reset("a" * 64, "weak")
    assert result.success is False
    store.consume_reset_token.assert_not_called()


@pytest.mark.asyncio
async def test_request_reset_unknown_email(store, mock_mailer):
    service = PasswordResetService(store, mock_mailer, SETTINGS)
    result = await service.request_reset("ghost@my.csun.edu")
    assert result.success is True
    mock_mailer.send_password_reset_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_round_trip(store, mock_mailer):
    store.create(
        User(
            email="bob@my.csun.edu",
            password_hash=get_password_hash("Old-pass1!"),
            first_name="Bob",
            last_name="Jones",
            is_verified=True,
        )
    )
    service = PasswordResetService(store, mock_mailer, SETTINGS)

    await service.request_reset("bob@my.csun.edu")
    _, token, first_name = mock_mailer.send_password_reset_email.await_args.args
    assert first_name == "Bob"

    result = await service.confirm_reset(token, "N3w-pass!")
    assert result.success is True

    user = store.get_by_email("bob@my.csun.edu")
    assert user.password_reset_token is None
    assert user.password_reset_expires_at is None


def test_store_create_duplicate_email(store):
    """The unique index catches duplicates that slip past the lookup."""
    store.create(User(email="carol@my.csun.edu", password_hash="x", first_name="Carol", last_name="Lee"))

    with pytest.raises(DuplicateEmailError):
        store.create(User(email="carol@my.csun.edu", password_hash="y", first_name="Carol", last_name="Lee"))
    assert len(store.list_all()) == 1


@pytest.mark.asyncio
async def test_concurrent_confirms_use_token_once(store, mock_mailer):
    store.create(
        User(
            email="dana@my.csun.edu",
            password_hash=get_password_hash("Old-pass1!"),
            first_name="Dana",
            last_name="Park",
            is_verified=True,
        )
    )
    await PasswordResetService(store, mock_mailer, SETTINGS).request_reset("dana@my.csun.edu")
    _, token, _ = mock_mailer.send_password_reset_email.await_args.args

    first_session, second_session = TestingSessionLocal(), TestingSessionLocal()
    try:
        first = PasswordResetService(UserStore(first_session), mock_mailer, SETTINGS)
        second = PasswordResetService(UserStore(second_session), mock_mailer, SETTINGS)
        results = await asyncio.gather(
            first.confirm_reset(token, "N3w-pass!"),
            second.confirm_reset(token, "0ther-Pass!"),
        )
    finally:
        first_session.close()
        second_session.close()

    assert [result.success for result in results].count(True) == 1
    failed = next(result for result in results if not result.success)
    assert failed.message == INVALID_TOKEN_MESSAGE

    winner = "N3w-pass!" if results[0].success else "0ther-Pass!"
    store.db.expire_all()
    assert verify_password(winner, store.get_by_email("dana@my.csun.edu").password_hash)


def test_consume_reset_token_is_single_use(store):
    user = store.create(User(email="eve@my.csun.edu", password_hash="x", first_name="Eve", last_name="Moss"))
    user.password_reset_token = "digest"
    user.password_reset_expires_at = datetime.now(UTC) + timedelta(minutes=5)
    store.save(user)

    claimed = store.consume_reset_token("digest")
    assert claimed.id == user.id
    assert claimed.password_reset_token is None
    assert store.consume_reset_token("digest") is None
