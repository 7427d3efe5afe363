import os
import re

import pytest


def test_non_admin_is_forbidden(client, user_headers):
    response = client.get("/api/admin/users", headers=user_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


def test_create_list_and_delete_user(client, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"username": "bob", "password": "bob-password", "role": "user"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    created = response.json()
    assert created["username"] == "bob"
    assert created["role"] == "user"

    users = client.get("/api/admin/users", headers=admin_headers).json()["users"]
    assert "bob" in [u["username"] for u in users]
    assert all("password_hash" not in u for u in users)

    response = client.delete(f"/api/admin/users/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    users = client.get("/api/admin/users", headers=admin_headers).json()["users"]
    assert "bob" not in [u["username"] for u in users]


def test_delete_unknown_user(client, admin_headers):
    response = client.delete("/api/admin/users/does-not-exist", headers=admin_headers)
    assert response.status_code == 404


def test_duplicate_username(client, admin_headers):
    payload = {"username": "carol", "password": "carol-password", "role": "user"}
    assert client.post("/api/admin/users", json=payload, headers=admin_headers).status_code == 200

    response = client.post("/api/admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Username already exists"}


@pytest.mark.parametrize("payload, message", [
    ({"username": "ab", "password": "long-enough", "role": "user"},
     "Username must be at least 3 characters long"),
    ({"username": "x" * 31, "password": "long-enough", "role": "user"},
     "Username must be less than 30 characters"),
    ({"username": "   ", "password": "long-enough", "role": "user"},
     "Username cannot be empty"),
    ({"username": "dave", "password": "short", "role": "user"},
     "Password must be at least 8 characters long"),
    ({"username": "dave", "password": "long-enough", "role": "root"},
     "Role must be either admin or user"),
])
def test_create_user_validation(client, admin_headers, payload, message):
    response = client.post("/api/admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_create_application(client, admin_headers, settings):
    response = client.post("/api/admin/applications", json={"name": "acme"}, headers=admin_headers)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["name"] == "acme"
    assert re.fullmatch(r"app_[a-f0-9]{32}", data["api_key"])
    assert os.path.isdir(data["folder_path"])
    assert data["folder_path"] == os.path.join(settings.UPLOAD_DIR, "acme")


def test_duplicate_application_name(client, admin_headers):
    first = client.post("/api/admin/applications", json={"name": "acme"}, headers=admin_headers)
    assert first.status_code == 200

    response = client.post("/api/admin/applications", json={"name": "acme"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Application name already exists"}

    apps = client.get("/api/user/applications", headers=admin_headers).json()["applications"]
    assert len(apps) == 1
    assert apps[0]["api_key"] == first.json()["api_key"]


@pytest.mark.parametrize("name, message", [
    ("ab", "Application name must be at least 3 characters long"),
    ("a" * 51, "Application name must be less than 50 characters"),
    ("bad/name", "Application name contains invalid characters"),
    ("what?", "Application name contains invalid characters"),
    ("ab\x00cd", "Application name contains invalid characters"),
    ("   ", "Application name is required"),
])
def test_application_name_validation(client, admin_headers, name, message):
    response = client.post("/api/admin/applications", json={"name": name}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_regenerate_key_invalidates_old_key(client, admin_headers, application):
    old_headers = {"X-API-Key": application["api_key"]}
    assert client.get("/api/files", headers=old_headers).status_code == 200

    response = client.put(
        f"/api/admin/applications/{application['id']}/regenerate-key", headers=admin_headers
    )
    assert response.status_code == 200, response.text
    new_key = response.json()["api_key"]
    assert new_key != application["api_key"]
    assert re.fullmatch(r"app_[a-f0-9]{32}", new_key)

    response = client.get("/api/files", headers=old_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid API key"}
    assert client.get("/api/files", headers={"X-API-Key": new_key}).status_code == 200


def test_regenerate_key_unknown_application(client, admin_headers):
    response = client.put("/api/admin/applications/nope/regenerate-key", headers=admin_headers)
    assert response.status_code == 404


def test_delete_application_removes_files(client, admin_headers, application, api_headers, upload):
    file_id = upload().json()["id"]
    folder = application["folder_path"]
    assert len(os.listdir(folder)) == 1

    response = client.delete(f"/api/admin/applications/{application['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert not os.path.exists(folder)
    assert client.get("/api/files", headers=api_headers).status_code == 401
    assert client.get(f"/api/public/{file_id}/info").status_code == 404

    # Same name can be provisioned again and starts empty
    response = client.post("/api/admin/applications", json={"name": "acme"}, headers=admin_headers)
    assert response.status_code == 200
    new_headers = {"X-API-Key": response.json()["api_key"]}
    assert client.get("/api/files", headers=new_headers).json() == {"files": []}


def test_delete_unknown_application(client, admin_headers):
    response = client.delete("/api/admin/applications/nope", headers=admin_headers)
    assert response.status_code == 404
