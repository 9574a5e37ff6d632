def test_clients_crud_and_filters(client, tenant_a):
    headers = tenant_a["headers"]
    client.post('/api/clients', headers=headers, json={"name": "Zeta", "type": "supplier", "document": "12.345.678/0001-90"})
    client.post('/api/clients', headers=headers, json={"name": "Alfa", "email": "alfa@mail.com"})
    both = client.post('/api/clients', headers=headers, json={"name": "Beta", "type": "both"}).get_json()

    names = [c["name"] for c in client.get('/api/clients', headers=headers).get_json()]
    assert names == ["Alfa", "Beta", "Zeta"]

    suppliers = [c["name"] for c in client.get('/api/clients?type=supplier', headers=headers).get_json()]
    assert suppliers == ["Beta", "Zeta"]

    found = [c["name"] for c in client.get('/api/clients?search=345.678', headers=headers).get_json()]
    assert found == ["Zeta"]

    resp = client.put(f'/api/clients/{both["id"]}', headers=headers, json={"name": "Beta Ltda", "type": "client"})
    assert resp.status_code == 200
    assert client.get('/api/clients?search=Beta', headers=headers).get_json()[0]["name"] == 'Beta Ltda'

    assert client.delete(f'/api/clients/{both["id"]}', headers=headers).status_code == 200


def test_client_validation(client, tenant_a):
    resp = client.post('/api/clients', headers=tenant_a["headers"], json={"name": "X", "type": "partner"})
    assert resp.status_code == 400

    resp = client.post('/api/clients', headers=tenant_a["headers"], json={"email": "a@b.com"})
    assert resp.status_code == 400
    assert "name" in resp.get_json()["details"]


def test_products_crud(client, tenant_a):
    headers = tenant_a["headers"]
    product = client.post('/api/products', headers=headers, json={
        "name": "Teclado", "sale_price": 150, "cost_price": 90, "stock": 12,
    }).get_json()

    assert product["min_stock"] == 5
    assert product["low_stock"] is False

    resp = client.put(f'/api/products/{product["id"]}', headers=headers, json={"name": "Teclado", "stock": 3})
    assert resp.status_code == 200
    low = client.get('/api/products?low_stock=true', headers=headers).get_json()
    assert [p["name"] for p in low] == ["Teclado"]

    assert client.delete(f'/api/products/{product["id"]}', headers=headers).status_code == 200
    assert client.get('/api/products', headers=headers).get_json() == []


def test_search_wildcards_match_literally(client, tenant_a):
    headers = tenant_a["headers"]
    client.post('/api/clients', headers=headers, json={"name": "100% Natural"})
    client.post('/api/clients', headers=headers, json={"name": "Loja_Centro"})
    client.post('/api/clients', headers=headers, json={"name": "Alfa"})

    percent = [c["name"] for c in client.get('/api/clients?search=%25', headers=headers).get_json()]
    assert percent == ["100% Natural"]

    underscore = [c["name"] for c in client.get('/api/clients?search=_', headers=headers).get_json()]
    assert underscore == ["Loja_Centro"]
