from datetime import timedelta

import pytest
from jose import jwt

from security import (
    AdminNotFound,
    InvalidCredentials,
    authenticate_admin,
    change_password,
    create_access_token,
    hash_password,
    verify_password,
)
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_hash_is_salted_and_verifiable():
    first = hash_password("s3cret-pass")
    second = hash_password("s3cret-pass")
    assert first != second
    assert verify_password("s3cret-pass", first)
    assert not verify_password("wrong-pass", first)


def test_authenticate_with_correct_password(database, admin):
    result = authenticate_admin(database, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert result["email"] == ADMIN_EMAIL
    assert database.find_one("admin", {"email": ADMIN_EMAIL})["last_login"] is not None


def test_authenticate_email_is_case_insensitive(database, admin):
    assert authenticate_admin(database, "  Admin@Example.com ", ADMIN_PASSWORD)["email"] == ADMIN_EMAIL


@pytest.mark.parametrize("password", ["", "admin@123", "Admin@1234", "Admin@12"])
def test_authenticate_rejects_wrong_password(database, admin, password):
    with pytest.raises(InvalidCredentials):
        authenticate_admin(database, ADMIN_EMAIL, password)


def test_authenticate_unknown_admin(database, admin):
    with pytest.raises(AdminNotFound) as excinfo:
        authenticate_admin(database, "nobody@example.com", ADMIN_PASSWORD)
    assert excinfo.value.status_code == 404


def test_change_password_requires_current_password(database, admin):
    with pytest.raises(InvalidCredentials):
        change_password(database, admin, "wrong", "new-password-1")

    change_password(database, admin, ADMIN_PASSWORD, "new-password-1")
    authenticate_admin(database, ADMIN_EMAIL, "new-password-1")
    with pytest.raises(InvalidCredentials):
        authenticate_admin(database, ADMIN_EMAIL, ADMIN_PASSWORD)


def test_access_token_claims(settings):
    token = create_access_token({"sub": ADMIN_EMAIL, "role": "admin"}, settings, timedelta(minutes=5))
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert payload["sub"] == ADMIN_EMAIL
    assert payload["role"] == "admin"
    assert "exp" in payload
