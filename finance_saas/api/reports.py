from datetime import date

from flask import Blueprint, request, jsonify

from finance_saas.errors import ValidationError
from finance_saas.schemas.transaction_schema import TRANSACTION_TYPES
from finance_saas.services import reports
from finance_saas.services.filters import parse_date_arg, parse_int_arg
from finance_saas.services.security import current_tenant_id, tenant_required
from finance_saas.api.transactions import ai_analysis

bp = Blueprint('reports', __name__)


@bp.route('/financials', methods=['GET'])
@tenant_required
def financials():
    """
    Yearly statement (DRE).

    Query Parameters:
        - year: int (default: current year)

    Returns 12 monthly entries, zero-filled, plus yearly totals.
    """
    year = parse_int_arg(request.args, 'year', date.today().year, minimum=1900, maximum=9999)
    return jsonify(reports.monthly_statement(current_tenant_id(), year)), 200


@bp.route('/categories', methods=['GET'])
@tenant_required
def categories():
    today = date.today()
    month = parse_int_arg(request.args, 'month', today.month, minimum=1, maximum=12)
    year = parse_int_arg(request.args, 'year', today.year, minimum=1900, maximum=9999)
    tx_type = request.args.get('type') or 'expense'
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError("type must be income or expense")
    return jsonify(reports.category_breakdown(current_tenant_id(), tx_type, month, year)), 200


@bp.route('/extract', methods=['GET'])
@tenant_required
def extract():
    """Full transaction detail with category, client and creator names."""
    start_date = parse_date_arg(request.args, 'start_date') or parse_date_arg(request.args, 'startDate')
    end_date = parse_date_arg(request.args, 'end_date') or parse_date_arg(request.args, 'endDate')
    return jsonify(reports.financial_extract(current_tenant_id(), start_date, end_date)), 200


# Same analysis as /api/transactions/ai-analysis
bp.add_url_rule('/ai-analysis', endpoint='ai_analysis', view_func=ai_analysis, methods=['GET'])
