from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage shared by every request (scoped_session)
from utils.credentials import CredentialVerifier
from utils.file_store import FileStore
from utils.tokens import TokenAuthority
from utils.uploads import UploadDirectory

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "File Store API",
        "version": "1.0.0",
        "description": "Users sign up and sign in with JWT sessions, then upload, list, update, download and delete files.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    Each app owns its own token table, credential verifier and file store,
    kept in app.extensions. `overrides` is applied on top of the selected
    config class (tests use it for the database url and storage root).
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE"],
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"])

    uploads = UploadDirectory(app.config["FILE_STORAGE_ROOT"], app.config["UPLOAD_DIR"])
    app.extensions["token_authority"] = TokenAuthority.from_config(app.config)
    app.extensions["credentials"] = CredentialVerifier(storage)
    app.extensions["file_store"] = FileStore(storage, uploads)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .files import bp as files_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(files_bp, url_prefix="/file")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to File Store API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
