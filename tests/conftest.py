"""Pytest fixtures.

Every test gets its own SQLite file database and storage root under
tmp_path. `app`/`client` build a full Flask app; `db`/`file_store` give the
storage layer without Flask.
"""
import io
from datetime import timedelta

import pytest
from werkzeug.datastructures import FileStorage

from api import create_app
from models import storage
from utils.file_store import FileStore
from utils.tokens import TokenAuthority, TokenStore
from utils.uploads import UploadDirectory

TEST_USER_ID = "user@example.com"
TEST_PASSWORD = "secret12"


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'app.db'}",
            "FILE_STORAGE_ROOT": str(tmp_path / "files"),
        },
    )
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tokens(client):
    """Refresh and bearer tokens of a freshly signed up user."""
    response = client.post("/signup", json={"id": TEST_USER_ID, "password": TEST_PASSWORD})
    assert response.status_code == 201
    return response.get_json()["data"]


@pytest.fixture
def auth_headers(tokens):
    return {"Authorization": f"Bearer {tokens['bearer']}"}


@pytest.fixture
def db(tmp_path):
    storage.reload(f"sqlite:///{tmp_path / 'store.db'}")
    yield storage
    storage.close()


@pytest.fixture
def uploads(tmp_path):
    return UploadDirectory(str(tmp_path / "files"))


@pytest.fixture
def file_store(db, uploads):
    return FileStore(db, uploads)


@pytest.fixture
def make_upload():
    def _make(data: bytes = b"hello", filename: str = "note.txt", content_type: str = "text/plain"):
        return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)

    return _make


@pytest.fixture
def authority():
    return TokenAuthority(
        TokenStore(),
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        access_ttl=timedelta(minutes=10),
        refresh_ttl=timedelta(days=1),
    )
