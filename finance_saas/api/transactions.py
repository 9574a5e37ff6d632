from flask import Blueprint, request, jsonify, current_app

from finance_saas.errors import NotFoundError, PlanLimitError
from finance_saas.extensions import db
from finance_saas.models.category import Category
from finance_saas.models.client import Client
from finance_saas.models.transaction import Transaction
from finance_saas.schemas.transaction_schema import TransactionCreateSchema, TransactionStatusSchema
from finance_saas.services import ai_insight, reports
from finance_saas.services.audit import log_action
from finance_saas.services.categories import DEFAULT_CATEGORY, get_or_create_category
from finance_saas.services.filters import (
    search_filter,
    parse_date_arg,
    parse_int_arg,
    parse_pagination,
    pagination_meta,
)
from finance_saas.services.plans import consume_ai_credit
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('transactions', __name__)

create_schema = TransactionCreateSchema()
status_schema = TransactionStatusSchema()

RECENT_LIMIT = 5
NO_DATA_SUMMARY = "Sem dados suficientes para análise."


def _date_arg(name, alias):
    return parse_date_arg(request.args, name) or parse_date_arg(request.args, alias)


@bp.route('', methods=['GET'])
@tenant_required
def list_transactions():
    """
    List the tenant's transactions, newest competence date first.

    Query Parameters:
        - page: int (default: 1)
        - limit: int (default: 20, max: 100)
        - type: income | expense
        - status: pending | completed
        - start_date / end_date: YYYY-MM-DD (inclusive); startDate/endDate also accepted
        - category_id: int
        - search: str (description, case-insensitive)

    Returns:
        - data: array of transactions
        - pagination: {page, limit, total_count, total_pages, has_next, has_prev}
    """
    tenant_id = current_tenant_id()
    page, limit = parse_pagination(request.args)

    query = Transaction.query.filter(Transaction.tenant_id == tenant_id)

    tx_type = request.args.get('type')
    if tx_type:
        query = query.filter(Transaction.type == tx_type)
    status = request.args.get('status')
    if status:
        query = query.filter(Transaction.status == status)

    start_date = _date_arg('start_date', 'startDate')
    end_date = _date_arg('end_date', 'endDate')
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)

    category_id = parse_int_arg(request.args, 'category_id', None)
    if category_id is not None:
        query = query.filter(Transaction.category_id == category_id)

    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(search_filter(search, Transaction.description))

    total_count = query.count()
    rows = (
        query
        .order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    current_app.logger.debug(
        "Transactions: tenant_id=%s page=%s limit=%s total=%s", tenant_id, page, limit, total_count
    )
    return jsonify({
        "data": [t.to_dict() for t in rows],
        "pagination": pagination_meta(page, limit, total_count),
    }), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_transaction():
    """
    Create a ledger entry.

    The category is looked up (or created) by name within the tenant and
    type. With ``use_ai_category`` the name comes from the AI adapter, which
    degrades to "Geral"; no AI allowance left also means "Geral".
    """
    tenant_id = current_tenant_id()
    user_id = current_user_id()
    data = create_schema.load(request.get_json(silent=True) or {})

    if data.get('client_id') is not None:
        if not Client.query.filter_by(id=data['client_id'], tenant_id=tenant_id).first():
            raise NotFoundError("Cliente não encontrado.")

    category_name = data.get('category') or DEFAULT_CATEGORY
    if data['use_ai_category']:
        if consume_ai_credit(tenant_id):
            category_name = ai_insight.categorize(data['description'])
        else:
            category_name = DEFAULT_CATEGORY

    try:
        category = get_or_create_category(tenant_id, category_name, data['type'])
        transaction = Transaction(
            tenant_id=tenant_id,
            category_id=category.id,
            client_id=data.get('client_id'),
            description=data['description'],
            amount=data['amount'],
            type=data['type'],
            cost_type=data['cost_type'],
            status=data['status'],
            date=data['date'],
            attachment_path=data.get('attachment_path'),
            created_by=user_id,
        )
        db.session.add(transaction)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log_action(
        tenant_id, user_id, 'CREATE', 'transaction', transaction.id,
        f"{transaction.description} - R$ {float(transaction.amount):.2f}"
    )
    return jsonify(transaction.to_dict()), 201


@bp.route('/<int:transaction_id>/status', methods=['PATCH'])
@tenant_required
def update_transaction_status(transaction_id):
    tenant_id = current_tenant_id()
    data = status_schema.load(request.get_json(silent=True) or {})

    updated = (
        Transaction.query
        .filter_by(id=transaction_id, tenant_id=tenant_id)
        .update({Transaction.status: data['status']}, synchronize_session=False)
    )
    if not updated:
        raise NotFoundError("Transação não encontrada.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'UPDATE', 'transaction', transaction_id, f"status={data['status']}")
    transaction = Transaction.query.filter_by(id=transaction_id, tenant_id=tenant_id).first()
    return jsonify(transaction.to_dict()), 200


@bp.route('/<int:transaction_id>', methods=['DELETE'])
@tenant_required
def delete_transaction(transaction_id):
    tenant_id = current_tenant_id()

    deleted = Transaction.query.filter_by(id=transaction_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Transação não encontrada.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'transaction', transaction_id)
    return jsonify({"message": "Transação removida."}), 200


@bp.route('/dashboard', methods=['GET'])
@tenant_required
def dashboard():
    """Current month KPIs: completed income/expense, pending amounts, balance."""
    return jsonify(reports.dashboard_summary(current_tenant_id())), 200


@bp.route('/recent', methods=['GET'])
@tenant_required
def recent_transactions():
    rows = (
        Transaction.query
        .filter_by(tenant_id=current_tenant_id())
        .order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return jsonify([t.to_dict() for t in rows]), 200


@bp.route('/categories', methods=['GET'])
@tenant_required
def transaction_categories():
    query = Category.query.filter_by(tenant_id=current_tenant_id())
    tx_type = request.args.get('type')
    if tx_type:
        query = query.filter(Category.type == tx_type)
    return jsonify([c.to_dict() for c in query.order_by(Category.name.asc()).all()]), 200


@bp.route('/chart-data', methods=['GET'])
@tenant_required
def chart_data():
    return jsonify(reports.chart_series(current_tenant_id())), 200


@bp.route('/ai-analysis', methods=['GET'])
@tenant_required
def ai_analysis():
    """
    AI financial-health report over the latest transactions.

    Each call with data counts against the tenant's AI allowance (403 when
    exhausted). Adapter failures come back as the fallback insight, not an error.
    """
    tenant_id = current_tenant_id()
    limit = current_app.config['AI_INSIGHT_TRANSACTION_LIMIT']
    rows = (
        Transaction.query
        .filter_by(tenant_id=tenant_id)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .limit(limit)
        .all()
    )
    if not rows:
        return jsonify({"summary": NO_DATA_SUMMARY}), 200

    if not consume_ai_credit(tenant_id):
        raise PlanLimitError("Limite de uso de IA do plano atingido. Faça um upgrade no plano.")

    insight = ai_insight.generate_insight(rows, f"Últimas {limit} transações")
    current_app.logger.info("AI analysis served: tenant_id=%s health_score=%s", tenant_id, insight["health_score"])
    return jsonify(insight), 200
