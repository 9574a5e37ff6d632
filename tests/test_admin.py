from finance_saas.extensions import db
from finance_saas.models.client import Client
from finance_saas.models.tenant import Tenant
from finance_saas.models.transaction import Transaction
from finance_saas.models.user import User
from conftest import auth_headers


def test_requires_super_admin(client, tenant_a):
    for method, url in (('get', '/api/admin/tenants'), ('get', '/api/admin/stats'), ('get', '/api/admin/plans')):
        resp = getattr(client, method)(url, headers=tenant_a["headers"])
        assert resp.status_code == 403


def test_list_tenants_with_counts(client, super_admin, tenant_a, tenant_b):
    client.post('/api/transactions', headers=tenant_a["headers"], json={
        "description": "Venda", "amount": 10, "type": "income", "date": "2024-01-01",
    })

    tenants = client.get('/api/admin/tenants', headers=super_admin["headers"]).get_json()

    by_slug = {t["slug"]: t for t in tenants}
    assert set(by_slug) == {"plataforma", "acme", "globex"}
    assert by_slug["acme"]["user_count"] == 1
    assert by_slug["acme"]["transaction_count"] == 1
    assert by_slug["globex"]["transaction_count"] == 0


def test_create_tenant_with_plan(client, super_admin):
    plan = client.post('/api/admin/plans', headers=super_admin["headers"], json={
        "name": "pro", "maxUsers": 20, "aiUsageLimit": 1000, "price": 199.9,
    }).get_json()

    resp = client.post('/api/admin/tenants', headers=super_admin["headers"], json={
        "companyName": "Initech", "slug": "initech", "name": "Bill", "email": "bill@initech.com",
        "password": "secret", "planId": plan["id"],
    })

    assert resp.status_code == 201
    tenant = resp.get_json()["tenant"]
    assert (tenant["plan_tier"], tenant["max_users"], tenant["ai_usage_limit"]) == ("pro", 20, 1000)
    assert resp.get_json()["admin"]["role"] == 'admin'

    dup = client.post('/api/admin/tenants', headers=super_admin["headers"], json={
        "companyName": "Initech 2", "slug": "initech", "name": "X", "email": "x@initech.com", "password": "secret",
    })
    assert dup.status_code == 409


def test_impersonate(client, super_admin, tenant_a):
    resp = client.post(f'/api/admin/tenants/{tenant_a["tenant_id"]}/impersonate', headers=super_admin["headers"])

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user"]["isImpersonating"] is True
    assert body["user"]["tenantId"] == tenant_a["tenant_id"]

    client.post('/api/clients', headers=tenant_a["headers"], json={"name": "Cliente A"})
    rows = client.get('/api/clients', headers=auth_headers(body["token"])).get_json()
    assert [r["name"] for r in rows] == ["Cliente A"]


def test_update_plan_and_deactivate(client, super_admin, tenant_a):
    url = f'/api/admin/tenants/{tenant_a["tenant_id"]}/plan'

    assert client.put(url, headers=super_admin["headers"], json={}).status_code == 400

    resp = client.put(url, headers=super_admin["headers"], json={"max_users": 2, "planTier": "custom"})
    assert resp.status_code == 200
    assert resp.get_json()["tenant"]["max_users"] == 2
    assert resp.get_json()["tenant"]["plan_tier"] == 'custom'

    client.put(url, headers=super_admin["headers"], json={"active": False})
    resp = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": tenant_a["password"]})
    assert resp.status_code == 403


def test_update_plan_unknown_plan(client, super_admin, tenant_a):
    resp = client.put(f'/api/admin/tenants/{tenant_a["tenant_id"]}/plan', headers=super_admin["headers"], json={"plan_id": 999})
    assert resp.status_code == 404


def test_plans_crud(client, super_admin):
    headers = super_admin["headers"]
    cheap = client.post('/api/admin/plans', headers=headers, json={"name": "basic", "price": 49}).get_json()
    client.post('/api/admin/plans', headers=headers, json={"name": "enterprise", "price": 999})

    assert [p["name"] for p in client.get('/api/admin/plans', headers=headers).get_json()] == ["basic", "enterprise"]

    resp = client.put(f'/api/admin/plans/{cheap["id"]}', headers=headers, json={"name": "starter", "price": 59})
    assert resp.get_json()["name"] == 'starter'
    assert resp.get_json()["price"] == 59.0

    assert client.post('/api/admin/plans', headers=headers, json={"price": 1}).status_code == 400
    assert client.delete(f'/api/admin/plans/{cheap["id"]}', headers=headers).status_code == 200
    assert client.delete(f'/api/admin/plans/{cheap["id"]}', headers=headers).status_code == 404


def test_delete_tenant_cascades(app, client, super_admin, tenant_a):
    headers = tenant_a["headers"]
    client.post('/api/clients', headers=headers, json={"name": "Cliente"})
    client.post('/api/transactions', headers=headers, json={
        "description": "Venda", "amount": 10, "type": "income", "date": "2024-01-01", "category": "Vendas",
    })

    resp = client.delete(f'/api/admin/tenants/{tenant_a["tenant_id"]}', headers=super_admin["headers"])

    assert resp.status_code == 200
    with app.app_context():
        assert db.session.get(Tenant, tenant_a["tenant_id"]) is None
        assert User.query.filter_by(tenant_id=tenant_a["tenant_id"]).count() == 0
        assert Client.query.filter_by(tenant_id=tenant_a["tenant_id"]).count() == 0
        assert Transaction.query.filter_by(tenant_id=tenant_a["tenant_id"]).count() == 0


def test_cannot_delete_own_tenant(client, super_admin):
    resp = client.delete(f'/api/admin/tenants/{super_admin["tenant_id"]}', headers=super_admin["headers"])
    assert resp.status_code == 400


def test_super_admin_management(client, super_admin):
    headers = super_admin["headers"]
    resp = client.post('/api/admin/admins', headers=headers, json={
        "name": "Suporte", "email": "suporte@plataforma.com", "password": "secret",
    })
    assert resp.status_code == 201
    new_admin = resp.get_json()
    assert new_admin["is_super_admin"] is True
    assert new_admin["tenant_id"] == super_admin["tenant_id"]

    dup = client.post('/api/admin/admins', headers=headers, json={
        "name": "Outro", "email": "suporte@plataforma.com", "password": "secret",
    })
    assert dup.status_code == 409

    emails = [a["email"] for a in client.get('/api/admin/admins', headers=headers).get_json()]
    assert sorted(emails) == ["root@plataforma.com", "suporte@plataforma.com"]

    assert client.delete(f'/api/admin/admins/{super_admin["user_id"]}', headers=headers).status_code == 400
    assert client.delete(f'/api/admin/admins/{new_admin["id"]}', headers=headers).status_code == 200
    assert client.delete(f'/api/admin/admins/{new_admin["id"]}', headers=headers).status_code == 404


def test_platform_stats(client, super_admin, tenant_a):
    client.post('/api/transactions', headers=tenant_a["headers"], json={
        "description": "Venda", "amount": 10, "type": "income", "date": "2024-01-01",
    })

    stats = client.get('/api/admin/stats', headers=super_admin["headers"]).get_json()

    assert stats["tenants"] == {"total": 2, "active": 2}
    assert stats["users"] == {"total": 2}
    assert stats["transactions"] == {"total": 1}
    assert stats["plans"] == [{"plan_tier": "basic", "tenants": 2}]
