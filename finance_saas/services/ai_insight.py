"""
AI Insight Adapter - Uses Claude API to categorise transactions and to write
a short financial-health analysis.

Neither call ever raises into the request: categorisation degrades to
"Geral" and the analysis degrades to a fixed fallback object.
"""
import json
import logging

from anthropic import Anthropic
from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'Geral'
CATEGORY_VOCABULARY = (
    'Vendas', 'Serviços', 'Salários', 'Impostos', 'Marketing', 'Servidores',
    'Aluguel', 'Fornecedores', 'Transporte', 'Alimentação', 'Geral',
)
MAX_CATEGORY_LENGTH = 40

FALLBACK_INSIGHT = {
    "health_score": 0,
    "health_label": "Indisponível",
    "summary": "<p>Desculpe, não foi possível gerar a análise no momento.</p>",
    "savings_tips": [],
}

# Cache for working model (to avoid trying all models on every call)
_working_model_cache = None


def get_anthropic_client():
    api_key = current_app.config.get('CLAUDE_API_KEY')
    if not api_key:
        raise ValueError("CLAUDE_API_KEY not configured")
    return Anthropic(api_key=api_key)


def _is_model_missing(exc):
    error_str = str(exc).lower()
    return "404" in error_str or "not_found" in error_str or "model not found" in error_str


def _complete(prompt, max_tokens):
    """
    Send ``prompt`` to the first available model of CLAUDE_MODELS and return
    the text of the reply. A model that answers 404 is skipped; any other
    error propagates to the caller.
    """
    global _working_model_cache
    client = get_anthropic_client()
    models = current_app.config['CLAUDE_MODELS']
    if _working_model_cache in models:
        models = [_working_model_cache] + [m for m in models if m != _working_model_cache]

    for model_name in models:
        try:
            message = client.messages.create(
                model=model_name,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}]
            )
        except Exception as exc:
            if _is_model_missing(exc):
                logger.warning("Model %s not available, trying next...", model_name)
                continue
            raise
        _working_model_cache = model_name
        return message.content[0].text.strip()

    raise ValueError(f"None of the configured Claude models are available: {models}")


def _strip_code_fence(text):
    if "```json" in text:
        return text.split("```json")[1].split("```")[0].strip()
    if "```" in text:
        return text.split("```")[1].split("```")[0].strip()
    return text


def health_label(score):
    if score >= 80:
        return "Excelente"
    if score >= 60:
        return "Boa"
    if score >= 40:
        return "Atenção"
    return "Crítica"


def categorize(description):
    """Return a short category name for ``description``; "Geral" on any failure."""
    if not description or not description.strip():
        return DEFAULT_CATEGORY

    prompt = f"""Categorize a seguinte transação financeira em uma categoria curta (máx 2 palavras).
Prefira uma destas: {", ".join(CATEGORY_VOCABULARY)}.
Transação: "{description.strip()}"
Responda apenas a categoria."""

    try:
        text = _complete(prompt, max_tokens=20)
    except Exception as exc:
        logger.error("Automatic categorization failed: %s", exc)
        return DEFAULT_CATEGORY

    name = text.strip().strip('."\'').splitlines()[0].strip() if text.strip() else ''
    if not name or len(name) > MAX_CATEGORY_LENGTH:
        return DEFAULT_CATEGORY
    for known in CATEGORY_VOCABULARY:
        if known.lower() == name.lower():
            return known
    return name


def summarize_transactions(transactions):
    """One "date: description - R$ amount (type)" line per transaction."""
    lines = []
    for t in transactions:
        lines.append(f"{t.date.isoformat()}: {t.description} - R$ {float(t.amount):.2f} ({t.type})")
    return "\n".join(lines)


def parse_insight(text):
    """Parse the model reply into the insight contract. Raises ValueError on garbage."""
    data = json.loads(_strip_code_fence(text))
    if not isinstance(data, dict):
        raise ValueError("Insight response is not a JSON object")

    score = int(data.get('health_score') or 0)
    score = max(0, min(100, score))
    tips = data.get('savings_tips') or []
    if isinstance(tips, str):
        tips = [tips]

    return {
        "health_score": score,
        "health_label": data.get('health_label') or health_label(score),
        "summary": str(data.get('summary') or ''),
        "savings_tips": [str(tip) for tip in tips],
    }


def generate_insight(transactions, period_label):
    """
    Ask the model for a financial-health analysis of ``transactions``.

    Returns:
        dict: health_score (0-100), health_label, summary (HTML), savings_tips
    """
    prompt = f"""Você é um assistente financeiro empresarial especialista.
Analise as seguintes transações financeiras do período: {period_label}.

Dados:
{summarize_transactions(transactions)}

Tarefa:
1. Identifique padrões de gastos.
2. Sugira onde a empresa pode economizar.
3. Dê um breve parecer sobre a saúde financeira baseada apenas nestes dados.

Formato da resposta: JSON com as chaves "health_score" (0 a 100), "health_label",
"summary" (HTML simples com <p> e <strong>) e "savings_tips" (lista de textos).
Responda APENAS o JSON, sem markdown."""

    try:
        text = _complete(prompt, max_tokens=current_app.config['CLAUDE_MAX_TOKENS'])
        return parse_insight(text)
    except Exception as exc:
        logger.error("Financial insight generation failed: %s", exc)
        return {**FALLBACK_INSIGHT, "savings_tips": []}
