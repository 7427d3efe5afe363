from tests.conftest import make_settings


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["api"] == "/api"


def test_health_without_cache(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "services": {"database": "healthy", "cache": "disabled"},
    }


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_development_urls(tmp_path):
    settings = make_settings(tmp_path, BACKEND_DOMAIN="files.local", BACKEND_PORT=8080)
    assert settings.BACKEND_URL == "http://files.local:8080"
    assert settings.public_url("abc") == "http://files.local:8080/api/public/abc"
    assert settings.CORS_ORIGINS == ["*"]


def test_production_domain_overrides_urls(tmp_path):
    settings = make_settings(tmp_path, ENVIRONMENT="production", PRODUCTION_DOMAIN="files.example.com")
    assert settings.BACKEND_URL == "https://files.example.com"
    assert settings.FRONTEND_URL == "https://files.example.com"
    assert settings.CORS_ORIGINS == ["https://files.example.com", "https://www.files.example.com"]


def test_allowed_mime_types_from_comma_list(tmp_path):
    settings = make_settings(tmp_path, ALLOWED_MIME_TYPES="image/png, text/plain")
    assert settings.ALLOWED_MIME_TYPES == ["image/png", "text/plain"]
