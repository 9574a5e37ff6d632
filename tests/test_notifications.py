from datetime import date, timedelta


def test_low_stock_alert_created_once_per_day(client, tenant_a):
    headers = tenant_a["headers"]
    client.post('/api/products', headers=headers, json={"name": "Toner", "stock": 2, "min_stock": 5})
    client.post('/api/products', headers=headers, json={"name": "Papel", "stock": 50, "min_stock": 5})

    low = client.get('/api/products?low_stock=true', headers=headers).get_json()
    assert [p["name"] for p in low] == ["Toner"]

    client.get('/api/notifications', headers=headers)
    notes = client.get('/api/notifications', headers=headers).get_json()

    stock_alerts = [n for n in notes if n["title"].startswith("Alerta de Estoque")]
    assert len(stock_alerts) == 1
    assert stock_alerts[0]["title"] == 'Alerta de Estoque (1)'
    assert stock_alerts[0]["type"] == 'warning'
    assert stock_alerts[0]["is_read"] is False


def test_bills_due_alert(client, tenant_a):
    headers = tenant_a["headers"]
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    next_month = (date.today() + timedelta(days=40)).isoformat()
    for day in (yesterday, date.today().isoformat(), next_month):
        client.post('/api/transactions', headers=headers, json={
            "description": "Fornecedor", "amount": 90, "type": "expense", "date": day, "status": "pending",
        })

    notes = client.get('/api/notifications', headers=headers).get_json()

    assert [n["title"] for n in notes] == ['Contas Vencendo (2)']
    assert notes[0]["type"] == 'error'


def test_no_alerts_without_conditions(client, tenant_a):
    assert client.get('/api/notifications', headers=tenant_a["headers"]).get_json() == []


def test_mark_read_and_read_all(client, tenant_a):
    headers = tenant_a["headers"]
    client.post('/api/products', headers=headers, json={"name": "Toner", "stock": 0})
    client.post('/api/transactions', headers=headers, json={
        "description": "Boleto", "amount": 10, "type": "expense", "date": date.today().isoformat(), "status": "pending",
    })
    notes = client.get('/api/notifications', headers=headers).get_json()
    assert len(notes) == 2

    resp = client.patch(f'/api/notifications/{notes[0]["id"]}/read', headers=headers)
    assert resp.status_code == 200
    assert client.patch('/api/notifications/999/read', headers=headers).status_code == 404

    resp = client.patch('/api/notifications/read-all', headers=headers)
    assert resp.get_json()["updated"] == 1

    notes = client.get('/api/notifications', headers=headers).get_json()
    assert all(n["is_read"] for n in notes)
