from flask import Blueprint, request, jsonify
from sqlalchemy import or_

from finance_saas.errors import NotFoundError
from finance_saas.extensions import db
from finance_saas.models.client import Client
from finance_saas.schemas.catalog_schema import ClientSchema
from finance_saas.services.audit import log_action
from finance_saas.services.filters import search_filter
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('clients', __name__)

client_schema = ClientSchema()


@bp.route('', methods=['GET'])
@tenant_required
def list_clients():
    """
    List clients/suppliers, name ascending.

    Query Parameters:
        - type: client | supplier (rows typed 'both' match either)
        - search: str (name, email or document)
    """
    query = Client.query.filter(Client.tenant_id == current_tenant_id())

    client_type = request.args.get('type')
    if client_type:
        query = query.filter(or_(Client.type == client_type, Client.type == 'both'))

    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(search_filter(search, Client.name, Client.email, Client.document))

    return jsonify([c.to_dict() for c in query.order_by(Client.name.asc()).all()]), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_client():
    tenant_id = current_tenant_id()
    data = client_schema.load(request.get_json(silent=True) or {})

    client = Client(tenant_id=tenant_id, **data)
    db.session.add(client)
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'CREATE', 'client', client.id, client.name)
    return jsonify(client.to_dict()), 201


@bp.route('/<int:client_id>', methods=['PUT'])
@tenant_required
def update_client(client_id):
    tenant_id = current_tenant_id()
    data = client_schema.load(request.get_json(silent=True) or {})

    updated = Client.query.filter_by(id=client_id, tenant_id=tenant_id).update(data, synchronize_session=False)
    if not updated:
        raise NotFoundError("Cliente não encontrado.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'UPDATE', 'client', client_id, data['name'])
    return jsonify(Client.query.filter_by(id=client_id, tenant_id=tenant_id).first().to_dict()), 200


@bp.route('/<int:client_id>', methods=['DELETE'])
@tenant_required
def delete_client(client_id):
    tenant_id = current_tenant_id()

    deleted = Client.query.filter_by(id=client_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Cliente não encontrado.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'client', client_id)
    return jsonify({"message": "Cliente removido."}), 200
