from __future__ import annotations

from flask import Blueprint, g, current_app

from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required
from .errors import success_response

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()


@bp.get("/info")
@jwt_required()
def info():
    """
    Get current user id.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      403:
        description: Invalid token
      404:
        description: User no longer exists
    """
    user = current_app.extensions["credentials"].get_user(g.current_user_id)
    return success_response(user_out_schema.dump(user))
