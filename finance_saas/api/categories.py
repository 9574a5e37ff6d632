from flask import Blueprint, request, jsonify

from finance_saas.errors import ConflictError, NotFoundError
from finance_saas.extensions import db
from finance_saas.models.category import Category
from finance_saas.models.transaction import Transaction
from finance_saas.schemas.catalog_schema import CategorySchema
from finance_saas.services.audit import log_action
from finance_saas.services.categories import get_or_create_category
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('categories', __name__)

category_schema = CategorySchema()


@bp.route('', methods=['GET'])
@tenant_required
def list_categories():
    rows = Category.query.filter_by(tenant_id=current_tenant_id()).order_by(Category.name.asc()).all()
    return jsonify([c.to_dict() for c in rows]), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_category():
    """Create a category; an identical name+type already present is returned as-is."""
    tenant_id = current_tenant_id()
    data = category_schema.load(request.get_json(silent=True) or {})

    try:
        category = get_or_create_category(tenant_id, data['name'], data['type'])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log_action(tenant_id, current_user_id(), 'CREATE', 'category', category.id, category.name)
    return jsonify(category.to_dict()), 201


@bp.route('/<int:category_id>', methods=['DELETE'])
@tenant_required
def delete_category(category_id):
    """
    Delete a category.

    Refused with 409 while any transaction still references it; the
    transactions are never cascaded away.
    """
    tenant_id = current_tenant_id()

    category = Category.query.filter_by(id=category_id, tenant_id=tenant_id).first()
    if not category:
        raise NotFoundError("Categoria não encontrada.")

    in_use = (
        db.session.query(Transaction.id)
        .filter(Transaction.tenant_id == tenant_id, Transaction.category_id == category_id)
        .first()
    )
    if in_use:
        raise ConflictError("Não é possível excluir esta categoria pois existem transações vinculadas a ela.")

    name = category.name
    db.session.delete(category)
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'category', category_id, name)
    return jsonify({"message": "Categoria removida."}), 200
