from unittest.mock import patch

from finance_saas.extensions import db
from finance_saas.models.category import Category
from finance_saas.services import categories


def test_create_is_idempotent_per_name_and_type(app, client, tenant_a):
    headers = tenant_a["headers"]
    first = client.post('/api/categories', headers=headers, json={"name": "Aluguel", "type": "expense"})
    second = client.post('/api/categories', headers=headers, json={"name": "Aluguel", "type": "expense"})
    income = client.post('/api/categories', headers=headers, json={"name": "Aluguel", "type": "income"})

    assert first.status_code == 201
    assert first.get_json()["id"] == second.get_json()["id"]
    assert income.get_json()["id"] != first.get_json()["id"]

    with app.app_context():
        assert Category.query.filter_by(tenant_id=tenant_a["tenant_id"]).count() == 2


def test_same_name_in_two_tenants(client, tenant_a, tenant_b):
    a = client.post('/api/categories', headers=tenant_a["headers"], json={"name": "Vendas", "type": "income"})
    b = client.post('/api/categories', headers=tenant_b["headers"], json={"name": "Vendas", "type": "income"})

    assert a.status_code == b.status_code == 201
    assert a.get_json()["id"] != b.get_json()["id"]


def test_create_rejects_unknown_type(client, tenant_a):
    resp = client.post('/api/categories', headers=tenant_a["headers"], json={"name": "X", "type": "transfer"})
    assert resp.status_code == 400
    assert "type" in resp.get_json()["details"]


def test_delete_referenced_category_conflicts(app, client, tenant_a):
    headers = tenant_a["headers"]
    tx = client.post('/api/transactions', headers=headers, json={
        "description": "Conta de luz", "amount": 200, "type": "expense", "date": "2024-05-05", "category": "Energia",
    }).get_json()

    resp = client.delete(f'/api/categories/{tx["category_id"]}', headers=headers)

    assert resp.status_code == 409
    with app.app_context():
        assert db.session.get(Category, tx["category_id"]) is not None


def test_delete_unused_category(client, tenant_a):
    headers = tenant_a["headers"]
    category = client.post('/api/categories', headers=headers, json={"name": "Viagens", "type": "expense"}).get_json()

    assert client.delete(f'/api/categories/{category["id"]}', headers=headers).status_code == 200
    assert client.get('/api/categories', headers=headers).get_json() == []
    assert client.delete(f'/api/categories/{category["id"]}', headers=headers).status_code == 404


def test_concurrently_created_category_is_reused(app, tenant_a):
    tenant_id = tenant_a["tenant_id"]
    with app.app_context():
        existing = categories.get_or_create_category(tenant_id, "Marketing", "expense")
        db.session.commit()
        existing_id = existing.id

        real_find = categories.find_category
        lookups = []

        def find_after_race(*args):
            # First lookup misses, as if the other request had not committed yet
            lookups.append(args)
            return None if len(lookups) == 1 else real_find(*args)

        with patch.object(categories, 'find_category', side_effect=find_after_race):
            category = categories.get_or_create_category(tenant_id, "Marketing", "expense")

        assert category.id == existing_id
        assert len(lookups) == 2

        db.session.add(Category(tenant_id=tenant_id, name="Eventos", type="expense"))
        db.session.commit()
        assert Category.query.filter_by(tenant_id=tenant_id).count() == 2
