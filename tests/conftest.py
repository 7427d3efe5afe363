import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from filehost.core.config import Settings
from filehost.main import create_app

ADMIN_PASSWORD = "admin-password"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATABASE_PATH=str(tmp_path / "data" / "database.sqlite"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
        JWT_SECRET_KEY="test-secret",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_png(size=(64, 64), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def user_headers(client, admin_headers):
    client.post(
        "/api/admin/users",
        json={"username": "alice", "password": "alice-password", "role": "user"},
        headers=admin_headers,
    )
    response = client.post("/api/auth/login", json={"username": "alice", "password": "alice-password"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def application(client, admin_headers):
    response = client.post("/api/admin/applications", json={"name": "acme"}, headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def api_headers(application):
    return {"X-API-Key": application["api_key"]}


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def upload(client, api_headers):
    def _upload(name="logo.png", content=None, content_type="image/png", is_public=None, headers=None):
        if content is None:
            content = make_png()
        data = {} if is_public is None else {"is_public": str(is_public).lower()}
        return client.post(
            "/api/files/upload",
            files={"file": (name, content, content_type)},
            data=data,
            headers=headers or api_headers,
        )

    return _upload
