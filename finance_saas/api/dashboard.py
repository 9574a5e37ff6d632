from flask import Blueprint, jsonify, current_app

from finance_saas.services import reports
from finance_saas.services.security import current_tenant_id, tenant_required

bp = Blueprint('dashboard', __name__)


@bp.route('', methods=['GET'])
@tenant_required
def general_stats():
    """
    Home Dashboard Endpoint

    Returns for the current tenant:
    - finance: completed income/expense/balance of the current month
    - os: open and critical service orders
    - stock: products at or below their minimum stock
    - clients: total registered
    """
    tenant_id = current_tenant_id()
    current_app.logger.debug("Dashboard: Fetching stats for tenant_id=%s", tenant_id)
    return jsonify(reports.general_stats(tenant_id)), 200
