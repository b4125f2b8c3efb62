"""
Authentication blueprint:
- POST /signup           -> create user, return refresh + bearer tokens
- POST /signin           -> check credentials, return refresh + bearer tokens
- POST /signin/new_token -> trade a refresh token for a new bearer token
- GET  /logout           -> drop the bearer and refresh tokens of the caller

Passwords are hashed with argon2 (utils.security); tokens are HS256 JWTs
held in the app's token table (utils.tokens).
"""
from __future__ import annotations

from flask import Blueprint, request, g, current_app

from models.schemas.user import UserCredentialsSchema, RefreshSchema
from utils.decorators import jwt_required, token_authority
from .errors import success_response

bp = Blueprint("auth", __name__)

credentials_schema = UserCredentialsSchema()
refresh_schema = RefreshSchema()


@bp.post("/signup")
def signup():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            id: { type: string, description: "phone number (7-15 digits) or email" }
            password: { type: string, description: "4-10 characters" }
    responses:
      201:
        description: Created (returns refresh and bearer tokens)
      405:
        description: Validation error
      409:
        description: id already used
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    user = current_app.extensions["credentials"].register(data["id"], data["password"])
    return success_response(token_authority().issue_pair(user.id), 201)


@bp.post("/signin")
def signin():
    """
    Login: return refresh and bearer tokens
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             id: { type: string }
             password: { type: string }
    responses:
      201:
        description: OK (returns tokens)
      403:
        description: incorrect id or password
      405:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    current_app.extensions["credentials"].check_credentials(data["id"], data["password"])
    return success_response(token_authority().issue_pair(data["id"]), 201)


@bp.post("/signin/new_token")
def new_token():
    """
    Use a refresh token to obtain a new bearer token.
    Body: { "refresh": "<token>" }
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh: { type: string }
    responses:
      200:
        description: OK (returns bearer)
      403:
        description: Invalid, expired or unknown refresh token
    """
    payload = request.get_json(silent=True) or {}
    token = refresh_schema.load(payload)["refresh"] or ""

    authority = token_authority()
    authority.validate_refresh(token)
    return success_response({"bearer": authority.refresh(token)})


@bp.get("/logout")
@jwt_required()
def logout():
    """
    logout: revokes the bearer token and its refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      403:
        description: Invalid token
    """
    token_authority().revoke_session(g.bearer)
    return success_response()
