from flask import Blueprint, request, jsonify, current_app

from finance_saas.services.security import current_tenant_id, tenant_required
from finance_saas.services.storage import store_upload

bp = Blueprint('upload', __name__)


@bp.route('', methods=['POST'])
@tenant_required
def upload_file():
    """
    Upload a receipt or avatar (multipart field ``file``).

    Accepts JPEG, PNG, WEBP and PDF up to 5MB.

    Returns:
        201: {"filename", "url"}
        400: missing file or type not allowed
        413: file too large
    """
    stored = store_upload(request.files.get('file'))
    current_app.logger.info("Upload stored: tenant_id=%s filename=%s", current_tenant_id(), stored["filename"])
    return jsonify(stored), 201
