from flask import Blueprint, request, jsonify

from finance_saas.errors import NotFoundError, ValidationError
from finance_saas.extensions import db
from finance_saas.models.service_order import ServiceOrder
from finance_saas.schemas.service_order_schema import ServiceOrderCreateSchema, ServiceOrderStatusSchema
from finance_saas.services.audit import log_action
from finance_saas.services.billing import bill_service_order
from finance_saas.services.filters import search_filter
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('service_orders', __name__)

create_schema = ServiceOrderCreateSchema()
status_schema = ServiceOrderStatusSchema()


@bp.route('', methods=['GET'])
@tenant_required
def list_service_orders():
    """
    List service orders, newest first.

    Query Parameters:
        - status: open | in_progress | waiting | completed | all
        - search: str (client name or equipment)
    """
    query = ServiceOrder.query.filter(ServiceOrder.tenant_id == current_tenant_id())

    status = request.args.get('status')
    if status and status != 'all':
        query = query.filter(ServiceOrder.status == status)

    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(search_filter(search, ServiceOrder.client_name, ServiceOrder.equipment))

    rows = query.order_by(ServiceOrder.created_at.desc(), ServiceOrder.id.desc()).all()
    return jsonify([o.to_dict() for o in rows]), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_service_order():
    tenant_id = current_tenant_id()
    data = create_schema.load(request.get_json(silent=True) or {})

    order = ServiceOrder(tenant_id=tenant_id, status='open', **data)
    db.session.add(order)
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'CREATE', 'service_order', order.id, f"{order.client_name} - {order.equipment}")
    return jsonify(order.to_dict()), 201


@bp.route('/<int:order_id>/status', methods=['PATCH'])
@tenant_required
def update_service_order_status(order_id):
    """
    Move an order between open / in_progress / waiting.

    Completion only happens through POST /<id>/bill, which also posts the
    revenue; a completed order cannot be reopened here.
    """
    tenant_id = current_tenant_id()
    data = status_schema.load(request.get_json(silent=True) or {})

    if data['status'] == 'completed':
        raise ValidationError("Use a finalização da OS para concluí-la e lançar a receita.")

    order = ServiceOrder.query.filter_by(id=order_id, tenant_id=tenant_id).first()
    if not order:
        raise NotFoundError("OS não encontrada.")
    if order.status == 'completed':
        raise ValidationError("Esta OS já foi finalizada.")

    order.status = data['status']
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'UPDATE', 'service_order', order_id, f"status={data['status']}")
    return jsonify(order.to_dict()), 200


@bp.route('/<int:order_id>/bill', methods=['POST'])
@tenant_required
def bill_order(order_id):
    """
    Complete the order and post its price as completed income, atomically.

    Returns:
        200: order completed, transaction posted
        404: order not found for this tenant
        409: order already completed
    """
    tenant_id = current_tenant_id()
    user_id = current_user_id()

    transaction = bill_service_order(tenant_id, order_id, user_id)

    log_action(tenant_id, user_id, 'UPDATE', 'service_order', order_id, "status=completed (faturada)")
    log_action(tenant_id, user_id, 'CREATE', 'transaction', transaction.id, transaction.description)
    return jsonify({
        "message": "OS finalizada e receita lançada com sucesso!",
        "transaction": transaction.to_dict(),
    }), 200


@bp.route('/<int:order_id>', methods=['DELETE'])
@tenant_required
def delete_service_order(order_id):
    tenant_id = current_tenant_id()

    deleted = ServiceOrder.query.filter_by(id=order_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("OS não encontrada.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'service_order', order_id)
    return jsonify({"message": "Ordem de serviço removida."}), 200
