from flask import Blueprint, jsonify

from finance_saas.services.audit import list_recent
from finance_saas.services.security import current_tenant_id, tenant_required

bp = Blueprint('audit', __name__)


@bp.route('', methods=['GET'])
@tenant_required
def list_audit_logs():
    """100 newest audit entries of the tenant, with the acting user's name."""
    return jsonify([entry.to_dict() for entry in list_recent(current_tenant_id())]), 200
