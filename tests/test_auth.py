"""
Tests for the local admin gate.
"""
import json
import pytest

from folio.auth.gate import SESSION_KEY, USER_STORAGE_KEY, AuthGate
from folio.storage.backends import MemoryStorage


@pytest.fixture
def gate():
    return AuthGate(MemoryStorage(), MemoryStorage())


def test_sign_up_then_sign_in(gate):
    assert not gate.is_authenticated

    result = gate.sign_up("admin@example.com", "secret")
    assert result.success

    result = gate.sign_in("admin@example.com", "secret")
    assert result.success
    assert result.message == "Sign in successful!"
    assert gate.is_authenticated


def test_password_is_not_stored_in_plain_text(gate):
    gate.sign_up("admin@example.com", "secret")

    stored = json.loads(gate.local_storage.get_item(USER_STORAGE_KEY))
    assert "password" not in stored
    assert "secret" not in json.dumps(stored)


def test_second_sign_up_is_rejected(gate):
    gate.sign_up("admin@example.com", "secret")

    result = gate.sign_up("other@example.com", "other")

    assert not result.success
    assert "already exists" in result.message


@pytest.mark.parametrize("email, password", [
    ("admin@example.com", "wrong"),
    ("other@example.com", "secret"),
])
def test_invalid_credentials(gate, email, password):
    gate.sign_up("admin@example.com", "secret")

    result = gate.sign_in(email, password)

    assert not result.success
    assert result.message == "Invalid email or password."
    assert not gate.is_authenticated


def test_sign_in_without_user(gate):
    result = gate.sign_in("admin@example.com", "secret")

    assert not result.success
    assert "sign up first" in result.message


def test_sign_out(gate):
    gate.sign_up("admin@example.com", "secret")
    gate.sign_in("admin@example.com", "secret")

    gate.sign_out()

    assert not gate.is_authenticated
    assert gate.session_storage.get_item(SESSION_KEY) is None


def test_disabled_storage_is_reported(gate):
    gate.local_storage.disabled = True

    result = gate.sign_up("admin@example.com", "secret")

    assert not result.success
    assert "Local storage might be disabled" in result.message


def test_corrupted_user_record(gate):
    gate.local_storage.set_item(USER_STORAGE_KEY, "{broken")

    result = gate.sign_in("admin@example.com", "secret")

    assert not result.success
    assert not gate.is_authenticated
