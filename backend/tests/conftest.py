import pytest
from fastapi.testclient import TestClient

from backend.cms.config import Settings
from backend.cms.db import SessionLocal
from backend.cms.main import create_app
from backend.cms.services import stylesheet_service

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def cms_settings(tmp_path):
    return Settings(
        _env_file=None,
        APP_SECRET="test-secret",
        DATABASE_URL=f"sqlite:///{tmp_path / 'cms.sqlite'}",
        STYLESHEET_PATH=str(tmp_path / "style.css"),
        BASE_PATH="",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        ADMIN_PASSWORD_HASH=None,
    )


@pytest.fixture(autouse=True)
def css_fetches(monkeypatch):
    """Replace the CDN download; the list records every requested URL."""
    calls = []

    def fake_fetch(url, timeout):
        calls.append(url)
        return f"/* theme from {url} */"

    monkeypatch.setattr(stylesheet_service, "_fetch_css", fake_fetch)
    return calls


@pytest.fixture
def app(cms_settings):
    return create_app(cms_settings)


@pytest.fixture
def db(app):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    resp = client.post(
        "/login",
        data={"username": "admin", "password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    return client
