import io


def _upload(client, headers, content, filename, mimetype):
    return client.post(
        '/api/upload',
        headers=headers,
        data={"file": (io.BytesIO(content), filename, mimetype)},
        content_type='multipart/form-data',
    )


def test_upload_image_is_served(client, tenant_a):
    resp = _upload(client, tenant_a["headers"], b'\x89PNG fake image', 'Nota Fiscal.PNG', 'image/png')

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["filename"].endswith('.png')
    assert body["url"] == f"/uploads/{body['filename']}"

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.data == b'\x89PNG fake image'


def test_upload_pdf(client, tenant_a):
    resp = _upload(client, tenant_a["headers"], b'%PDF-1.4', 'comprovante.pdf', 'application/pdf')
    assert resp.status_code == 201


def test_upload_rejects_other_types(client, tenant_a):
    resp = _upload(client, tenant_a["headers"], b'hello', 'notes.txt', 'text/plain')

    assert resp.status_code == 400
    assert resp.get_json()["message"] == 'Tipo de arquivo inválido. Apenas imagens e PDF.'


def test_upload_without_file(client, tenant_a):
    resp = client.post('/api/upload', headers=tenant_a["headers"], data={}, content_type='multipart/form-data')
    assert resp.status_code == 400


def test_upload_requires_token(client):
    assert _upload(client, {}, b'x', 'a.png', 'image/png').status_code == 401
