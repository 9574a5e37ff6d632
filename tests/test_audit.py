def test_writes_are_audited(client, tenant_a):
    headers = tenant_a["headers"]
    customer = client.post('/api/clients', headers=headers, json={"name": "Padaria"}).get_json()
    client.delete(f'/api/clients/{customer["id"]}', headers=headers)

    entries = client.get('/api/audit', headers=headers).get_json()

    assert [(e["action"], e["entity"]) for e in entries] == [("DELETE", "client"), ("CREATE", "client")]
    assert all(e["user_name"] == 'Admin' for e in entries)
    assert entries[0]["entity_id"] == customer["id"]


def test_reads_are_not_audited(client, tenant_a):
    client.get('/api/clients', headers=tenant_a["headers"])
    client.get('/api/transactions', headers=tenant_a["headers"])

    assert client.get('/api/audit', headers=tenant_a["headers"]).get_json() == []
