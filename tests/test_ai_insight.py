import json
from datetime import date
from unittest.mock import patch

import pytest

from finance_saas.extensions import db
from finance_saas.models.tenant import Tenant
from finance_saas.services import ai_insight


def test_parse_insight_clamps_score_and_labels():
    data = ai_insight.parse_insight(json.dumps({"health_score": 140, "summary": "<p>Ok</p>", "savings_tips": "Corte custos"}))

    assert data["health_score"] == 100
    assert data["health_label"] == 'Excelente'
    assert data["savings_tips"] == ["Corte custos"]


def test_parse_insight_strips_code_fence():
    text = '```json\n{"health_score": -5, "health_label": "Ruim", "summary": "x", "savings_tips": []}\n```'
    data = ai_insight.parse_insight(text)

    assert data["health_score"] == 0
    assert data["health_label"] == 'Ruim'


def test_parse_insight_rejects_garbage():
    with pytest.raises(ValueError):
        ai_insight.parse_insight("não é json")


@pytest.mark.parametrize("score, label", [(85, 'Excelente'), (60, 'Boa'), (45, 'Atenção'), (10, 'Crítica')])
def test_health_label(score, label):
    assert ai_insight.health_label(score) == label


def test_categorize_matches_known_vocabulary(app):
    with app.app_context(), patch.object(ai_insight, '_complete', return_value='"marketing".'):
        assert ai_insight.categorize("Anúncio no Instagram") == 'Marketing'


def test_categorize_without_api_key_falls_back(app):
    with app.app_context():
        assert ai_insight.categorize("Almoço") == 'Geral'


def _seed(client, headers):
    client.post('/api/transactions', headers=headers, json={
        "description": "Venda", "amount": 300, "type": "income", "date": date.today().isoformat(),
    })


def test_analysis_without_data(client, tenant_a):
    resp = client.get('/api/transactions/ai-analysis', headers=tenant_a["headers"])

    assert resp.status_code == 200
    assert resp.get_json() == {"summary": "Sem dados suficientes para análise."}


def test_analysis_consumes_credit(app, client, tenant_a):
    _seed(client, tenant_a["headers"])
    reply = json.dumps({"health_score": 72, "summary": "<p>Saudável</p>", "savings_tips": ["Renegociar aluguel"]})

    with patch.object(ai_insight, '_complete', return_value=reply) as completion:
        resp = client.get('/api/reports/ai-analysis', headers=tenant_a["headers"])

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["health_score"] == 72
    assert body["health_label"] == 'Boa'
    assert body["savings_tips"] == ["Renegociar aluguel"]
    assert "Venda - R$ 300.00 (income)" in completion.call_args.args[0]
    with app.app_context():
        assert db.session.get(Tenant, tenant_a["tenant_id"]).ai_usage_current == 1


def test_analysis_failure_returns_fallback(client, tenant_a):
    _seed(client, tenant_a["headers"])

    with patch.object(ai_insight, '_complete', side_effect=RuntimeError("timeout")):
        resp = client.get('/api/transactions/ai-analysis', headers=tenant_a["headers"])

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["health_score"] == 0
    assert body["health_label"] == 'Indisponível'
    assert body["savings_tips"] == []


def test_analysis_over_limit(app, client, tenant_a):
    _seed(client, tenant_a["headers"])
    with app.app_context():
        tenant = db.session.get(Tenant, tenant_a["tenant_id"])
        tenant.ai_usage_limit = 1
        tenant.ai_usage_current = 1
        db.session.commit()

    with patch.object(ai_insight, '_complete') as completion:
        resp = client.get('/api/transactions/ai-analysis', headers=tenant_a["headers"])

    assert resp.status_code == 403
    completion.assert_not_called()
