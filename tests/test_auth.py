from datetime import datetime, timedelta
from unittest.mock import patch

from flask_jwt_extended import decode_token

from conftest import auth_headers, login, register_tenant
from finance_saas.extensions import db
from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User


def test_register_then_login_token_carries_tenant_claims(app, client):
    account = register_tenant(client, slug='acme', email='acme@x.com', company_name='Acme', password='secret')

    token = login(client, 'acme@x.com', 'secret')

    with app.app_context():
        claims = decode_token(token)
        tenant = Tenant.query.filter_by(slug='acme').one()
        user = User.query.filter_by(email='acme@x.com').one()

        assert claims["tenantId"] == tenant.id == account["tenant_id"]
        assert claims["isSuperAdmin"] is False
        assert claims["role"] == 'admin'
        assert claims["sub"] == str(user.id)
        assert user.password_hash != 'secret'
        assert tenant.plan_tier == 'basic'


def test_register_validation_error(client):
    resp = client.post('/api/auth/register', json={"companyName": "Acme", "slug": "acme"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert "message" in body
    assert "email" in body["details"]


def test_register_duplicate_slug_is_conflict(client, tenant_a):
    resp = client.post('/api/auth/register', json={
        "companyName": "Other", "slug": "acme", "name": "X", "email": "x@other.com", "password": "secret",
    })

    assert resp.status_code == 409
    assert "slug" in resp.get_json()["message"]


def test_register_duplicate_email_leaves_no_tenant(app, client, tenant_a):
    resp = client.post('/api/auth/register', json={
        "companyName": "Other", "slug": "other", "name": "X", "email": tenant_a["email"], "password": "secret",
    })

    assert resp.status_code == 409
    with app.app_context():
        assert Tenant.query.filter_by(slug='other').first() is None


def test_register_uniqueness_race_rolls_back_tenant(app, client, tenant_a):
    # Pre-check misses the duplicate, so the unique constraint has to catch it
    with patch('finance_saas.services.provisioning.email_taken', return_value=False):
        resp = client.post('/api/auth/register', json={
            "companyName": "Racer", "slug": "racer", "name": "X", "email": tenant_a["email"], "password": "secret",
        })

    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Dados duplicados (Email ou Slug)."
    with app.app_context():
        assert Tenant.query.filter_by(slug='racer').first() is None
        assert Tenant.query.count() == 1


def test_login_wrong_password(client, tenant_a):
    resp = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": "wrong"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Credenciais inválidas"


def test_login_unknown_email(client):
    resp = client.post('/api/auth/login', json={"email": "nobody@x.com", "password": "secret"})
    assert resp.status_code == 401


def test_login_inactive_tenant_forbidden(app, client, tenant_a):
    with app.app_context():
        tenant = db.session.get(Tenant, tenant_a["tenant_id"])
        tenant.active = False
        db.session.commit()

    resp = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": "secret"})
    assert resp.status_code == 403


def test_protected_route_requires_token(client):
    resp = client.get('/api/clients')

    assert resp.status_code == 401
    assert "message" in resp.get_json()


def test_invalid_token_rejected(client):
    resp = client.get('/api/clients', headers=auth_headers('not-a-token'))
    assert resp.status_code == 401


def test_forgot_and_reset_password(app, client, tenant_a):
    with patch('finance_saas.tasks.email_tasks.send_email', return_value={"success": True, "message_id": "m-1"}) as sent:
        resp = client.post('/api/auth/forgot-password', json={"email": tenant_a["email"]})

    assert resp.status_code == 200
    assert sent.call_count == 1
    with app.app_context():
        user = db.session.get(User, tenant_a["user_id"])
        token = user.reset_token
        assert token
        assert user.reset_token_expires > datetime.utcnow()
    assert token in sent.call_args.kwargs["html_body"]

    resp = client.post('/api/auth/reset-password', json={"token": token, "password": "nova-senha"})
    assert resp.status_code == 200

    login(client, tenant_a["email"], "nova-senha")
    # Token is single use
    resp = client.post('/api/auth/reset-password', json={"token": token, "password": "outra-senha"})
    assert resp.status_code == 400


def test_forgot_password_unknown_email_still_ok(client):
    with patch('finance_saas.tasks.email_tasks.send_email') as sent:
        resp = client.post('/api/auth/forgot-password', json={"email": "ghost@x.com"})

    assert resp.status_code == 200
    sent.assert_not_called()


def test_reset_password_expired_token(app, client, tenant_a):
    with app.app_context():
        user = db.session.get(User, tenant_a["user_id"])
        user.reset_token = 'expired-token'
        user.reset_token_expires = datetime.utcnow() - timedelta(minutes=1)
        db.session.commit()

    resp = client.post('/api/auth/reset-password', json={"token": 'expired-token', "password": "nova-senha"})
    assert resp.status_code == 400


def test_profile_update(client, tenant_a):
    headers = tenant_a["headers"]

    resp = client.put('/api/auth/profile', headers=headers, json={"name": "Ana", "avatar": "/uploads/a.png"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["name"] == "Ana"
    assert resp.get_json()["user"]["avatar"] == "/uploads/a.png"

    resp = client.put('/api/auth/profile', headers=headers, json={"newPassword": "trocada"})
    assert resp.status_code == 400

    resp = client.put('/api/auth/profile', headers=headers, json={"currentPassword": "errada", "newPassword": "trocada"})
    assert resp.status_code == 400

    resp = client.put('/api/auth/profile', headers=headers, json={"currentPassword": "secret", "newPassword": "trocada"})
    assert resp.status_code == 200
    login(client, tenant_a["email"], "trocada")

    resp = client.get('/api/auth/profile', headers=headers)
    assert resp.get_json()["user"]["email"] == tenant_a["email"]


def test_profile_email_taken(client, tenant_a, tenant_b):
    resp = client.put('/api/auth/profile', headers=tenant_a["headers"], json={"email": tenant_b["email"]})
    assert resp.status_code == 409
