from flask import Blueprint, jsonify

from finance_saas.errors import NotFoundError
from finance_saas.services import notifications
from finance_saas.services.security import current_tenant_id, tenant_required

bp = Blueprint('notifications', __name__)


@bp.route('', methods=['GET'])
@tenant_required
def list_notifications():
    """
    Refresh today's stock / due-bill alerts, then return the 20 newest
    notifications.
    """
    return jsonify([n.to_dict() for n in notifications.list_notifications(current_tenant_id())]), 200


@bp.route('/<int:notification_id>/read', methods=['PATCH'])
@tenant_required
def mark_read(notification_id):
    if not notifications.mark_as_read(current_tenant_id(), notification_id):
        raise NotFoundError("Notificação não encontrada.")
    return jsonify({"success": True}), 200


@bp.route('/read-all', methods=['PATCH'])
@tenant_required
def mark_all_read():
    updated = notifications.mark_all_read(current_tenant_id())
    return jsonify({"success": True, "updated": updated}), 200
