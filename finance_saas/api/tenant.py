from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError

from finance_saas.errors import ConflictError, NotFoundError, ValidationError
from finance_saas.extensions import db
from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User
from finance_saas.schemas.tenant_schema import TenantSettingsSchema, TenantUserCreateSchema
from finance_saas.services.audit import log_action
from finance_saas.services.plans import ensure_user_seat_available
from finance_saas.services.security import (
    admin_required,
    current_tenant_id,
    current_user_id,
    hash_password,
    tenant_required,
)

bp = Blueprint('tenant', __name__)

settings_schema = TenantSettingsSchema()
user_create_schema = TenantUserCreateSchema()


def _current_tenant():
    tenant = db.session.get(Tenant, current_tenant_id())
    if not tenant:
        raise NotFoundError("Empresa não encontrada.")
    return tenant


@bp.route('/settings', methods=['GET'])
@tenant_required
def get_settings():
    """Company data plus its users (newest first)."""
    tenant = _current_tenant()
    users = User.query.filter_by(tenant_id=tenant.id).order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify({
        "tenant": tenant.to_dict(),
        "users": [u.to_dict() for u in users],
    }), 200


@bp.route('/settings', methods=['PUT'])
@tenant_required
def update_settings():
    data = settings_schema.load(request.get_json(silent=True) or {})
    tenant = _current_tenant()

    tenant.name = data['name']
    tenant.closing_day = data['closing_day']
    db.session.commit()

    log_action(tenant.id, current_user_id(), 'UPDATE', 'tenant', tenant.id, f"closing_day={tenant.closing_day}")
    return jsonify({"message": "Configurações atualizadas com sucesso!", "tenant": tenant.to_dict()}), 200


@bp.route('/users', methods=['POST'])
@admin_required
def create_user():
    """
    Add a user to the company.

    Returns:
        201: created user
        403: plan user limit reached
        409: email already in use
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})
    tenant = _current_tenant()

    ensure_user_seat_available(tenant)
    if User.query.filter_by(email=data['email']).first():
        raise ConflictError("Este email já está em uso.")

    user = User(
        tenant_id=tenant.id,
        name=data['name'],
        email=data['email'],
        password_hash=hash_password(data['password']),
        role=data['role'],
        is_super_admin=False,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Este email já está em uso.")

    log_action(tenant.id, current_user_id(), 'CREATE', 'user', user.id, user.email)
    return jsonify(user.to_dict()), 201


@bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    tenant_id = current_tenant_id()
    if user_id == current_user_id():
        raise ValidationError("Você não pode excluir sua própria conta.")

    deleted = User.query.filter_by(id=user_id, tenant_id=tenant_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Usuário não encontrado.")
    db.session.commit()

    log_action(tenant_id, current_user_id(), 'DELETE', 'user', user_id)
    return jsonify({"message": "Usuário removido com sucesso."}), 200
