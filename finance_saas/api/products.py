from flask import Blueprint, request, jsonify

from finance_saas.errors import NotFoundError
from finance_saas.extensions import db
from finance_saas.models.product import Product
from finance_saas.schemas.catalog_schema import ProductSchema
from finance_saas.services.audit import log_action
from finance_saas.services.filters import search_filter
from finance_saas.services.security import current_tenant_id, current_user_id, tenant_required

bp = Blueprint('products', __name__)

product_schema = ProductSchema()


@bp.route('', methods=['GET'])
@tenant_required
def list_products():
    """
    List products, name ascending.

    Query Parameters:
        - search: str (name or description)
        - low_stock: 'true' keeps only products with stock <= min_stock
    """
    query = Product.query.filter(Product.tenant_id == current_tenant_id())

    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(search_filter(search, Product.name, Product.description))

    if request.args.get('low_stock', '').lower() == 'true':
        query = query.filter(Product.stock <= Product.min_stock)

    return jsonify([p.to_dict() for p in query.order_by(Product.name.asc()).all()]), 200


@bp.route('', methods=['POST'])
@tenant_required
def create_product():
    tenant_id = current_tenant_id()
    data = product_schema.load(request.get_json(silent=True) or {})

    product = Product(tenant_id=tenant_id, **data)
    db.session.add(product)
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'CREATE', 'product', product.id, product.name)
    return jsonify(product.to_dict()), 201


@bp.route('/<int:product_id>', methods=['PUT'])
@tenant_required
def update_product(product_id):
    tenant_id = current_tenant_id()
    data = product_schema.load(request.get_json(silent=True) or {})

    updated = Product.query.filter_by(id=product_id, tenant_id=tenant_id).update(data, synchronize_session=False)
    if not updated:
        raise NotFoundError("Produto não encontrado.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'UPDATE', 'product', product_id, f"stock={data['stock']}")
    return jsonify(Product.query.filter_by(id=product_id, tenant_id=tenant_id).first().to_dict()), 200


@bp.route('/<int:product_id>', methods=['DELETE'])
@tenant_required
def delete_product(product_id):
    tenant_id = current_tenant_id()

    deleted = Product.query.filter_by(id=product_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Produto não encontrado.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'product', product_id)
    return jsonify({"message": "Produto removido."}), 200
