"""
Session tokens.

- TokenStore: the in-memory token table. One live record per
  (subject, kind); a new issuance overwrites the previous value.
- TokenAuthority: issues, validates, rotates and revokes access/refresh
  tokens against a TokenStore.

The table lives for the lifetime of the process only. Each Flask app owns
one store (app.extensions["token_authority"].store).
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

import jwt

from utils.errors import InvalidToken
from utils.security import create_jwt_token, decode_token, looks_like_jwt

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenRecord:
    subject_id: str
    kind: TokenKind
    value: str
    issued_at: datetime
    expires_at: datetime


class TokenStore:
    """Lock guarded map of (subject_id, kind) -> TokenRecord.

    Concurrent issuance for the same subject and kind is last-write-wins.
    """

    def __init__(self):
        self._records: Dict[Tuple[str, TokenKind], TokenRecord] = {}
        self.lock = threading.RLock()

    def __len__(self):
        with self.lock:
            return len(self._records)

    def put(self, record: TokenRecord) -> None:
        with self.lock:
            self._records[(record.subject_id, record.kind)] = record

    def get(self, subject_id: str, kind: TokenKind) -> Optional[TokenRecord]:
        with self.lock:
            return self._records.get((subject_id, kind))

    def find(self, kind: TokenKind, value: str) -> Optional[TokenRecord]:
        """Record of `kind` whose stored value equals `value`, if any."""
        if not value:
            return None
        with self.lock:
            for record in self._records.values():
                if record.kind is kind and record.value == value:
                    return record
        return None

    def discard_values(self, *values: str) -> int:
        """Remove every record holding one of `values`. Returns how many went."""
        targets = {v for v in values if v}
        with self.lock:
            stale = [key for key, rec in self._records.items() if rec.value in targets]
            for key in stale:
                del self._records[key]
        return len(stale)


class TokenAuthority:
    def __init__(
        self,
        store: TokenStore,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=10),
        refresh_ttl: timedelta = timedelta(days=1),
        algorithm: str = "HS256",
    ):
        self.store = store
        self._secrets = {TokenKind.ACCESS: access_secret, TokenKind.REFRESH: refresh_secret}
        self._ttls = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config, store: TokenStore | None = None) -> "TokenAuthority":
        return cls(
            store or TokenStore(),
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_ttl=config["ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def _issue(self, subject_id: str, kind: TokenKind) -> str:
        token, issued_at, expires_at = create_jwt_token(
            subject=subject_id,
            secret=self._secrets[kind],
            expires_in=self._ttls[kind],
            token_type=kind.value,
            algorithm=self.algorithm,
        )
        self.store.put(TokenRecord(str(subject_id), kind, token, issued_at, expires_at))
        return token

    def issue_access(self, subject_id: str) -> str:
        return self._issue(subject_id, TokenKind.ACCESS)

    def issue_refresh(self, subject_id: str) -> str:
        return self._issue(subject_id, TokenKind.REFRESH)

    def issue_pair(self, subject_id: str) -> dict:
        """Both tokens, shaped the way signup/signin return them."""
        return {
            "refresh": self.issue_refresh(subject_id),
            "bearer": self.issue_access(subject_id),
        }

    def _validate(self, token: str, kind: TokenKind, not_found_message: str) -> str:
        record = self.store.find(kind, token)
        if record is None:
            raise InvalidToken(not_found_message)

        if not looks_like_jwt(token):
            raise InvalidToken(not_found_message)

        try:
            decode_token(token, self._secrets[kind], expected_type=kind.value, algorithm=self.algorithm)
        except jwt.InvalidTokenError as exc:
            # a token that fails verification is dropped from the table
            self.store.discard_values(token)
            logger.info("dropped %s token of %s: %s", kind.value, record.subject_id, exc)
            raise InvalidToken(str(exc) or None)

        return record.subject_id

    def validate_access(self, token: str) -> str:
        return self._validate(token, TokenKind.ACCESS, "invalid authorization token")

    def validate_refresh(self, token: str) -> str:
        return self._validate(token, TokenKind.REFRESH, "invalid refresh token")

    def revoke_session(self, access_token: str) -> None:
        """Logout: drop the access token and the refresh token of its subject."""
        with self.store.lock:
            record = self.store.find(TokenKind.ACCESS, access_token)
            if record is None:
                raise InvalidToken("incorrect bearer token")
            refresh = self.store.get(record.subject_id, TokenKind.REFRESH)
            self.store.discard_values(access_token, refresh.value if refresh else "")
        logger.info("session closed for %s", record.subject_id)

    def refresh(self, refresh_token: str) -> str:
        """
        New access token for the owner of `refresh_token`.
        Only table membership is checked here; callers run validate_refresh
        first when signature and expiry matter.
        """
        record = self.store.find(TokenKind.REFRESH, refresh_token)
        if record is None:
            raise InvalidToken("incorrect refresh token")
        return self.issue_access(record.subject_id)
