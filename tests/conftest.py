"""
Pytest configuration.

Every test gets a fresh app bound to its own in-memory SQLite database,
with Celery running tasks eagerly and no external services configured.
"""
import os

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-with-enough-length")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from finance_saas import create_app  # noqa: E402
from finance_saas.config import Config  # noqa: E402
from finance_saas.extensions import db  # noqa: E402
from finance_saas.models.user import User  # noqa: E402


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # SQLite has no connection pool options
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'
    CELERY_TASK_ALWAYS_EAGER = True
    CLAUDE_API_KEY = None
    AWS_ACCESS_KEY_ID = None
    AWS_SECRET_ACCESS_KEY = None
    STORAGE_TYPE = 'local'
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(_Config)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def register_tenant(client, slug='acme', email=None, company_name='Acme', name='Admin', password='secret'):
    """Register a company through the API and return a small account dict."""
    email = email or f"admin@{slug}.com"
    resp = client.post('/api/auth/register', json={
        "companyName": company_name,
        "slug": slug,
        "name": name,
        "email": email,
        "password": password,
    })
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    return {
        "token": body["token"],
        "headers": auth_headers(body["token"]),
        "tenant_id": body["user"]["tenantId"],
        "user_id": body["user"]["id"],
        "email": email,
        "password": password,
    }


def login(client, email, password):
    resp = client.post('/api/auth/login', json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["token"]


@pytest.fixture
def tenant_a(client):
    return register_tenant(client, slug='acme', company_name='Acme')


@pytest.fixture
def tenant_b(client):
    return register_tenant(client, slug='globex', company_name='Globex')


@pytest.fixture
def super_admin(app, client):
    account = register_tenant(client, slug='plataforma', company_name='Plataforma', email='root@plataforma.com')
    with app.app_context():
        user = db.session.get(User, account["user_id"])
        user.is_super_admin = True
        db.session.commit()
    # Claims are fixed at issue time, so log in again
    token = login(client, account["email"], account["password"])
    account["token"] = token
    account["headers"] = auth_headers(token)
    return account
