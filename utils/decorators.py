from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from utils.tokens import TokenAuthority


def token_authority() -> TokenAuthority:
    return current_app.extensions["token_authority"]


def extract_bearer(header: str | None) -> str:
    """
    'Bearer <token>' -> '<token>'. Anything without a second part gives ''.
    """
    if not header or not header.strip():
        return ""
    parts = header.split(" ")
    return parts[1] if len(parts) > 1 else ""


def jwt_required():
    """
    Validate the access token from the Authorization header.
    Sets g.bearer (the raw token) and g.current_user_id.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_bearer(request.headers.get("Authorization"))
            # raises InvalidToken (403) and drops a token that fails verification
            g.current_user_id = token_authority().validate_access(token)
            g.bearer = token
            return fn(*args, **kwargs)

        return wrapper

    return decorator
