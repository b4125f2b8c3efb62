"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher, Type
from argon2.exceptions import VerificationError, InvalidHashError

# argon2id work factor (stands in for the bcrypt cost of 12): 3 passes over
# 64 MiB with 4 lanes, the RFC 9106 low-memory profile
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 64 * 1024
ARGON2_PARALLELISM = 4

ph = PasswordHasher(
    time_cost=ARGON2_TIME_COST,
    memory_cost=ARGON2_MEMORY_COST,
    parallelism=ARGON2_PARALLELISM,
    type=Type.ID,
)

# header.payload.signature, each part base64url
JWT_SHAPE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (salted, argon2id)
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def looks_like_jwt(token) -> bool:
    return isinstance(token, str) and bool(JWT_SHAPE.match(token))


def create_jwt_token(
    subject: str,
    secret: str,
    expires_in: timedelta,
    token_type: str,
    algorithm: str = "HS256",
    issuer: str = "file-store-api",
) -> tuple[str, datetime, datetime]:
    """
    Sign a token for `subject`. Returns (token, issued_at, expires_at).
    """
    issued_at = _now()
    expires_at = issued_at + expires_in
    payload = {
        "iss": issuer,
        "sub": str(subject),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)
    return token, issued_at, expires_at


def decode_token(token: str, secret: str, expected_type: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises jwt.InvalidTokenError (or a subclass)
    on a bad signature, an expired token or a token of the wrong type.
    """
    decoded = jwt.decode(
        token, secret, algorithms=[algorithm], options={"require": ["exp", "sub"]}
    )
    if decoded.get("type") != expected_type:
        raise jwt.InvalidTokenError("wrong token type")
    return decoded
