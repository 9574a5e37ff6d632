from datetime import date

from finance_saas.extensions import db
from finance_saas.models.transaction import Transaction


def _create(client, headers, **payload):
    resp = client.post('/api/transactions', headers=headers, json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_financials_has_twelve_months(client, tenant_a):
    headers = tenant_a["headers"]
    _create(client, headers, description="Venda", amount=1000, type="income", date="2024-03-10")
    _create(client, headers, description="Aluguel", amount=400, type="expense", date="2024-03-15")
    _create(client, headers, description="Pendente", amount=999, type="income", date="2024-03-20", status="pending")
    _create(client, headers, description="Ano anterior", amount=50, type="income", date="2023-12-31")

    body = client.get('/api/reports/financials?year=2024', headers=headers).get_json()

    assert body["year"] == 2024
    assert len(body["monthly"]) == 12
    assert [m["month"] for m in body["monthly"]][:3] == ["01", "02", "03"]
    march = body["monthly"][2]
    assert march["monthLabel"] == 'março'
    assert (march["income"], march["expense"], march["result"]) == (1000.0, 400.0, 600.0)
    assert body["monthly"][0]["income"] == 0.0
    assert body["totals"] == {"income": 1000.0, "expense": 400.0, "result": 600.0}


def test_financials_rejects_bad_year(client, tenant_a):
    assert client.get('/api/reports/financials?year=abc', headers=tenant_a["headers"]).status_code == 400


def test_category_breakdown(app, client, tenant_a):
    headers = tenant_a["headers"]
    _create(client, headers, description="Luz", amount=100, type="expense", date="2024-05-02", category="Energia")
    _create(client, headers, description="Luz 2", amount=50, type="expense", date="2024-05-20", category="Energia")
    _create(client, headers, description="Aluguel", amount=300, type="expense", date="2024-05-05", category="Aluguel")
    _create(client, headers, description="Junho", amount=70, type="expense", date="2024-06-05", category="Aluguel")

    with app.app_context():
        db.session.add(Transaction(
            tenant_id=tenant_a["tenant_id"], description="Sem categoria", amount=20,
            type='expense', status='completed', date=date(2024, 5, 9),
        ))
        db.session.commit()

    rows = client.get('/api/reports/categories?month=5&year=2024', headers=headers).get_json()

    assert rows == [
        {"name": "Aluguel", "total": 300.0},
        {"name": "Energia", "total": 150.0},
        {"name": "Sem Categoria", "total": 20.0},
    ]

    income = client.get('/api/reports/categories?month=5&year=2024&type=income', headers=headers).get_json()
    assert income == []


def test_extract_joins_names(client, tenant_a):
    headers = tenant_a["headers"]
    customer = client.post('/api/clients', headers=headers, json={"name": "Padaria Central"}).get_json()
    _create(client, headers, description="Venda", amount=80, type="income", date="2024-04-01",
            category="Vendas", client_id=customer["id"])
    _create(client, headers, description="Antiga", amount=10, type="income", date="2023-01-01")

    rows = client.get('/api/reports/extract?startDate=2024-01-01', headers=headers).get_json()

    assert len(rows) == 1
    row = rows[0]
    assert row["competence_date"] == '2024-04-01'
    assert row["category_name"] == 'Vendas'
    assert row["client_name"] == 'Padaria Central'
    assert row["created_by_name"] == 'Admin'
    assert row["registration_date"] is not None


def test_general_stats(client, tenant_a):
    headers = tenant_a["headers"]
    _create(client, headers, description="Venda", amount=500, type="income", date=date.today().isoformat())
    client.post('/api/service-orders', headers=headers, json={"client_name": "A", "equipment": "B", "priority": "high"})
    client.post('/api/service-orders', headers=headers, json={"client_name": "C", "equipment": "D"})
    client.post('/api/products', headers=headers, json={"name": "Cabo", "stock": 1, "min_stock": 3})
    client.post('/api/products', headers=headers, json={"name": "Mouse", "stock": 10, "min_stock": 3})
    client.post('/api/clients', headers=headers, json={"name": "Cliente"})

    stats = client.get('/api/dashboard', headers=headers).get_json()

    assert stats["finance"] == {"income": 500.0, "expense": 0.0, "balance": 500.0}
    assert stats["os"] == {"open": 2, "critical": 1}
    assert stats["stock"] == {"low": 1}
    assert stats["clients"] == {"total": 1}


def test_financials_last_supported_year(client, tenant_a):
    headers = tenant_a["headers"]
    _create(client, headers, description="Venda", amount=10, type="income", date="9999-12-31")

    resp = client.get('/api/reports/financials?year=9999', headers=headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["monthly"][11]["income"] == 10.0
    assert body["totals"]["income"] == 10.0

    resp = client.get('/api/reports/categories?year=9999&month=12&type=income', headers=headers)
    assert resp.status_code == 200
