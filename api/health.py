import logging

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import storage

bp = Blueprint("health", __name__)

VERSION = "1.0.0"


@bp.get("/health")
def health():
    """
    Health check: metadata store reachable and storage root present
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status: { type: string, example: ok }
            version: { type: string, example: 1.0.0 }
            database: { type: string, example: ok }
            storage: { type: string, example: ok }
      503:
        description: A backing store is unavailable
    """
    checks = {"database": "ok", "storage": "ok"}
    try:
        storage.get_session().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logging.exception("Health check: database unavailable")
        checks["database"] = "unavailable"

    uploads = current_app.extensions["file_store"].uploads
    if not uploads.exists_dir():
        checks["storage"] = "unavailable"

    healthy = all(v == "ok" for v in checks.values())
    body = {"status": "ok" if healthy else "degraded", "version": VERSION, **checks}
    return body, 200 if healthy else 503
