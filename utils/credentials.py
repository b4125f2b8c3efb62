"""
Credential checks for signin, and password encoding for signup.

Every failure of check_credentials (unknown id, wrong password, unreadable
hash) is reported as the same InvalidCredentials error so callers can't tell
which ids exist.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from models.user import User
from utils.errors import InvalidCredentials, NotFound, Conflict
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class CredentialVerifier:
    def __init__(self, storage):
        self.storage = storage

    def get_user(self, user_id: str) -> User:
        user = self.storage.get(User, user_id)
        if user is None:
            raise NotFound(f"user with id {user_id} not found")
        return user

    def check_credentials(self, user_id: str, password: str) -> bool:
        try:
            user = self.get_user(user_id)
            valid = verify_password(password, user.password_hash)
        except (NotFound, SQLAlchemyError) as exc:
            logger.debug("signin rejected for %s: %s", user_id, exc)
            raise InvalidCredentials()
        if not valid:
            raise InvalidCredentials()
        return True

    @staticmethod
    def encode_password(plaintext: str) -> str:
        return hash_password(plaintext)

    def ensure_vacant(self, user_id: str) -> None:
        if self.storage.get(User, user_id) is not None:
            raise Conflict(f"id {user_id} already used")

    def register(self, user_id: str, password: str) -> User:
        """Create a user after checking the id is free. Stores only the hash."""
        self.ensure_vacant(user_id)
        user = User(id=user_id, password_hash=self.encode_password(password))
        self.storage.new(user)
        self.storage.save()
        return user
