"""
Local admin gate for the content manager.

This only decides whether the editing surface is shown; it is not access
control. Credentials live in local storage, the signed-in marker in
session storage.
"""
import hashlib
import hmac
import json
import logging
import secrets

from pydantic import BaseModel

from ..storage.backends import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

USER_STORAGE_KEY = "portfolio_admin_user"
SESSION_KEY = "isAdmin"
_ITERATIONS = 100_000


class AuthResult(BaseModel):
    """Outcome of a sign-up or sign-in attempt."""
    success: bool
    message: str


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _ITERATIONS)
    return digest.hex()


class AuthGate:
    """Single local admin account with a session flag."""

    def __init__(self, local_storage: KeyValueStorage, session_storage: KeyValueStorage):
        self.local_storage = local_storage
        self.session_storage = session_storage

    @property
    def is_authenticated(self) -> bool:
        """The "editing authorized" capability."""
        try:
            return self.session_storage.get_item(SESSION_KEY) == "true"
        except StorageError as e:
            logger.error("Could not access session storage: %s", e)
            return False

    def sign_up(self, email: str, password: str) -> AuthResult:
        try:
            if self.local_storage.get_item(USER_STORAGE_KEY) is not None:
                return AuthResult(success=False, message="An admin user already exists. Cannot sign up again.")
            salt = secrets.token_hex(16)
            user = {"email": email, "salt": salt, "password_hash": _hash_password(password, salt)}
            self.local_storage.set_item(USER_STORAGE_KEY, json.dumps(user))
        except StorageError as e:
            logger.error("Sign up failed: %s", e)
            return AuthResult(
                success=False,
                message="An error occurred during sign up. Local storage might be disabled."
            )
        return AuthResult(success=True, message="Sign up successful! You can now sign in.")

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            stored = self.local_storage.get_item(USER_STORAGE_KEY)
            if stored is None:
                return AuthResult(success=False, message="No admin user found. Please sign up first.")
            try:
                user = json.loads(stored)
                expected = user["password_hash"]
                candidate = _hash_password(password, user["salt"])
                matches = user["email"] == email and hmac.compare_digest(candidate, expected)
            except (ValueError, KeyError, TypeError) as e:
                logger.error("Stored admin user is unreadable: %s", e)
                matches = False
            if not matches:
                return AuthResult(success=False, message="Invalid email or password.")
            self.session_storage.set_item(SESSION_KEY, "true")
        except StorageError as e:
            logger.error("Sign in failed: %s", e)
            return AuthResult(
                success=False,
                message="An error occurred during sign in. Local storage might be disabled."
            )
        return AuthResult(success=True, message="Sign in successful!")

    def sign_out(self):
        try:
            self.session_storage.remove_item(SESSION_KEY)
        except StorageError as e:
            logger.error("Could not access session storage: %s", e)
