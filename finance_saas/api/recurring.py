from flask import Blueprint, request, jsonify, current_app

from finance_saas.errors import NotFoundError
from finance_saas.extensions import db
from finance_saas.models.category import Category
from finance_saas.models.recurring_rule import RecurringRule
from finance_saas.schemas.recurring_schema import RecurringRuleSchema, RecurringToggleSchema
from finance_saas.services.audit import log_action
from finance_saas.services.categories import get_or_create_category
from finance_saas.services.recurring import process_due_rules
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('recurring', __name__)

rule_schema = RecurringRuleSchema()
toggle_schema = RecurringToggleSchema()


@bp.route('', methods=['GET'])
@tenant_required
def list_rules():
    rows = (
        RecurringRule.query
        .filter_by(tenant_id=current_tenant_id())
        .order_by(RecurringRule.next_run.asc(), RecurringRule.id.asc())
        .all()
    )
    return jsonify([r.to_dict() for r in rows]), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_rule():
    """
    Create a recurring rule. The first run happens on ``start_date``.

    Request Body:
        {
            "description": "Aluguel",
            "amount": 1500,
            "type": "expense",
            "frequency": "monthly",
            "start_date": "2024-01-31",
            "category_id": 3            (or "category": "Aluguel")
        }
    """
    tenant_id = current_tenant_id()
    data = rule_schema.load(request.get_json(silent=True) or {})

    try:
        category_id = data.get('category_id')
        if category_id is not None:
            if not Category.query.filter_by(id=category_id, tenant_id=tenant_id).first():
                raise NotFoundError("Categoria não encontrada.")
        elif data.get('category'):
            category_id = get_or_create_category(tenant_id, data['category'], data['type']).id

        rule = RecurringRule(
            tenant_id=tenant_id,
            description=data['description'],
            amount=data['amount'],
            type=data['type'],
            frequency=data['frequency'],
            start_date=data['start_date'],
            next_run=data['start_date'],
            category_id=category_id,
            active=True,
        )
        db.session.add(rule)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log_action(tenant_id, current_user_id(), 'CREATE', 'recurring', rule.id, f"{rule.description} ({rule.frequency})")
    return jsonify(rule.to_dict()), 201


@bp.route('/process', methods=['POST'])
@tenant_required
def process_rules():
    """Post every rule of this tenant whose next run is today or earlier."""
    tenant_id = current_tenant_id()
    processed = process_due_rules(tenant_id, user_id=current_user_id())
    current_app.logger.info("Recurring processed on demand: tenant_id=%s processed=%s", tenant_id, processed)
    return jsonify({"message": "Processamento concluído.", "processed": processed}), 200


@bp.route('/<int:rule_id>/toggle', methods=['PATCH'])
@tenant_required
def toggle_rule(rule_id):
    """Pause or resume a rule. Without a body the current state is flipped."""
    tenant_id = current_tenant_id()
    data = toggle_schema.load(request.get_json(silent=True) or {})

    rule = RecurringRule.query.filter_by(id=rule_id, tenant_id=tenant_id).first()
    if not rule:
        raise NotFoundError("Recorrência não encontrada.")

    rule.active = data['active'] if 'active' in data else not rule.active
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'UPDATE', 'recurring', rule_id, f"active={rule.active}")
    return jsonify(rule.to_dict()), 200


@bp.route('/<int:rule_id>', methods=['DELETE'])
@tenant_required
def delete_rule(rule_id):
    tenant_id = current_tenant_id()

    deleted = RecurringRule.query.filter_by(id=rule_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Recorrência não encontrada.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'recurring', rule_id)
    return jsonify({"message": "Removido com sucesso."}), 200
