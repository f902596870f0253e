"""Tests for the in-memory session authority."""

import pytest

from config import Settings
from errors import AuthError, ValidationError
from sessions import SessionAuthority, hash_password

EMAIL = "admin@example.com"
PASSWORD = "s3cret-pass"


@pytest.fixture
def authority():
    return SessionAuthority(EMAIL, hash_password(PASSWORD))


def test_login_issues_session(authority):
    session = authority.login(EMAIL, PASSWORD)

    assert len(session.token) == 64
    assert session.identity.email == EMAIL
    assert authority.validate(session.token) == session


def test_tokens_are_unique(authority):
    tokens = {authority.login(EMAIL, PASSWORD).token for _ in range(5)}
    assert len(tokens) == 5
    assert len(authority) == 5


@pytest.mark.parametrize(
    "email,password",
    [
        (EMAIL, "wrong"),
        ("someone@example.com", PASSWORD),
    ],
)
def test_login_rejects_bad_credentials(authority, email, password):
    with pytest.raises(AuthError):
        authority.login(email, password)
    assert len(authority) == 0


@pytest.mark.parametrize("email,password", [("", PASSWORD), (EMAIL, None)])
def test_login_requires_both_fields(authority, email, password):
    with pytest.raises(ValidationError):
        authority.login(email, password)


def test_validate_unknown_token(authority):
    assert authority.validate("nope") is None
    assert authority.validate(None) is None


def test_logout_ends_session(authority):
    token = authority.login(EMAIL, PASSWORD).token
    authority.logout(token)

    assert authority.validate(token) is None


def test_logout_is_idempotent(authority):
    authority.logout("unknown")
    authority.logout(None)
    token = authority.login(EMAIL, PASSWORD).token
    authority.logout(token)
    authority.logout(token)
    assert len(authority) == 0


def test_from_settings_prefers_password_hash(settings):
    settings.ADMIN_PASSWORD_HASH = hash_password("hashed-one")
    authority = SessionAuthority.from_settings(settings)

    assert authority.login(settings.ADMIN_EMAIL, "hashed-one")
    with pytest.raises(AuthError):
        authority.login(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


def test_login_with_mixed_case_domain(tmp_path):
    settings = Settings(DATA_DIR=tmp_path, ADMIN_EMAIL="Admin@Apex.COM", ADMIN_PASSWORD=PASSWORD)
    authority = SessionAuthority.from_settings(settings)

    assert authority.login("Admin@Apex.COM", PASSWORD).identity.email == settings.ADMIN_EMAIL
    assert authority.login("Admin@apex.com", PASSWORD)


def test_login_with_unparseable_email(authority):
    with pytest.raises(AuthError):
        authority.login("not an email", PASSWORD)
