from flask import Blueprint, request, jsonify, current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from finance_saas.errors import ConflictError, NotFoundError, ValidationError
from finance_saas.extensions import db
from finance_saas.models.plan import Plan
from finance_saas.models.tenant import Tenant
from finance_saas.models.transaction import Transaction
from finance_saas.models.user import User
from finance_saas.schemas.admin_schema import (
    AdminTenantCreateSchema,
    TenantPlanUpdateSchema,
    SuperAdminCreateSchema,
    PlanSchema,
)
from finance_saas.services.plans import apply_plan_to_tenant
from finance_saas.services.provisioning import provision_tenant
from finance_saas.services.security import (
    current_tenant_id,
    current_user_id,
    hash_password,
    issue_token,
    super_admin_required,
)

bp = Blueprint('admin', __name__)

tenant_create_schema = AdminTenantCreateSchema()
plan_update_schema = TenantPlanUpdateSchema()
admin_create_schema = SuperAdminCreateSchema()
plan_schema = PlanSchema()


def _get_tenant(tenant_id):
    tenant = db.session.get(Tenant, tenant_id)
    if not tenant:
        raise NotFoundError("Empresa não encontrada.")
    return tenant


# ---------------------------------------------------------------------------
# Tenants
# ---------------------------------------------------------------------------

@bp.route('/tenants', methods=['GET'])
@super_admin_required
def list_tenants():
    """Every tenant, newest first, with its user and transaction counts."""
    user_count = (
        db.session.query(func.count(User.id))
        .filter(User.tenant_id == Tenant.id)
        .correlate(Tenant)
        .scalar_subquery()
    )
    transaction_count = (
        db.session.query(func.count(Transaction.id))
        .filter(Transaction.tenant_id == Tenant.id)
        .correlate(Tenant)
        .scalar_subquery()
    )
    rows = (
        db.session.query(Tenant, user_count.label('user_count'), transaction_count.label('transaction_count'))
        .order_by(Tenant.created_at.desc(), Tenant.id.desc())
        .all()
    )
    return jsonify([
        {**tenant.to_dict(), "user_count": int(users or 0), "transaction_count": int(transactions or 0)}
        for tenant, users, transactions in rows
    ]), 200


@bp.route('/tenants', methods=['POST'])
@super_admin_required
def create_tenant():
    """
    Provision a company and its admin from the console.

    Request Body:
        {"companyName", "slug", "name", "email", "password", "plan_id"?}
    """
    data = tenant_create_schema.load(request.get_json(silent=True) or {})

    plan = None
    if data.get('plan_id') is not None:
        plan = db.session.get(Plan, data['plan_id'])
        if not plan:
            raise NotFoundError("Plano não encontrado.")

    tenant, user = provision_tenant(
        company_name=data['company_name'],
        slug=data['slug'],
        admin_name=data['name'],
        email=data['email'],
        password=data['password'],
        plan=plan,
    )
    current_app.logger.info(
        "Tenant created by super admin: tenant_id=%s by user_id=%s", tenant.id, current_user_id()
    )
    return jsonify({"tenant": tenant.to_dict(), "admin": user.to_dict()}), 201


@bp.route('/tenants/<int:tenant_id>', methods=['DELETE'])
@super_admin_required
def delete_tenant(tenant_id):
    """Hard delete; every row owned by the tenant goes with it."""
    if tenant_id == current_tenant_id():
        raise ValidationError("Você não pode excluir a sua própria empresa.")

    tenant = _get_tenant(tenant_id)
    db.session.delete(tenant)
    db.session.commit()

    current_app.logger.warning("Tenant deleted: tenant_id=%s by user_id=%s", tenant_id, current_user_id())
    return jsonify({"message": "Empresa removida com sucesso."}), 200


@bp.route('/tenants/<int:tenant_id>/impersonate', methods=['POST'])
@super_admin_required
def impersonate_tenant(tenant_id):
    """Issue a token for the tenant's first admin (support access)."""
    _get_tenant(tenant_id)
    target = (
        User.query
        .filter_by(tenant_id=tenant_id, role='admin')
        .order_by(User.id.asc())
        .first()
    )
    if not target:
        raise NotFoundError("Empresa não tem usuários admin.")

    current_app.logger.warning(
        "Impersonation: user_id=%s -> tenant_id=%s as user_id=%s", current_user_id(), tenant_id, target.id
    )
    return jsonify({
        "token": issue_token(target),
        "user": {
            "id": target.id,
            "name": target.name,
            "email": target.email,
            "role": target.role,
            "tenantId": target.tenant_id,
            "isImpersonating": True,
        }
    }), 200


@bp.route('/tenants/<int:tenant_id>/plan', methods=['PUT'])
@super_admin_required
def update_tenant_plan(tenant_id):
    """
    Apply a plan template (``plan_id``) and/or explicit limits.

    Request Body (any of):
        {"plan_id", "plan_tier", "max_users", "ai_usage_limit", "active"}
    """
    data = plan_update_schema.load(request.get_json(silent=True) or {})
    tenant = _get_tenant(tenant_id)

    apply_plan_to_tenant(
        tenant,
        plan_id=data.get('plan_id'),
        plan_tier=data.get('plan_tier'),
        max_users=data.get('max_users'),
        ai_usage_limit=data.get('ai_usage_limit'),
        active=data.get('active'),
    )
    db.session.commit()
    return jsonify({"message": "Plano atualizado com sucesso", "tenant": tenant.to_dict()}), 200


# ---------------------------------------------------------------------------
# Super admins
# ---------------------------------------------------------------------------

@bp.route('/admins', methods=['GET'])
@super_admin_required
def list_admins():
    rows = User.query.filter_by(is_super_admin=True).order_by(User.name.asc()).all()
    return jsonify([u.to_dict() for u in rows]), 200


@bp.route('/admins', methods=['POST'])
@super_admin_required
def create_admin():
    """Create a super-admin user inside the caller's own tenant."""
    data = admin_create_schema.load(request.get_json(silent=True) or {})
    if User.query.filter_by(email=data['email']).first():
        raise ConflictError("Este email já está em uso.")

    user = User(
        tenant_id=current_tenant_id(),
        name=data['name'],
        email=data['email'],
        password_hash=hash_password(data['password']),
        role='admin',
        is_super_admin=True,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Este email já está em uso.")

    current_app.logger.warning("Super admin created: user_id=%s by user_id=%s", user.id, current_user_id())
    return jsonify(user.to_dict()), 201


@bp.route('/admins/<int:user_id>', methods=['DELETE'])
@super_admin_required
def revoke_admin(user_id):
    """Remove the super-admin flag (the user account itself stays)."""
    if user_id == current_user_id():
        raise ValidationError("Você não pode remover seu próprio acesso de Super Admin.")

    updated = (
        User.query
        .filter_by(id=user_id, is_super_admin=True)
        .update({User.is_super_admin: False}, synchronize_session=False)
    )
    if not updated:
        raise NotFoundError("Super Admin não encontrado.")
    db.session.commit()
    return jsonify({"message": "Acesso de Super Admin removido."}), 200


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

@bp.route('/plans', methods=['GET'])
@super_admin_required
def list_plans():
    rows = Plan.query.order_by(Plan.price.asc(), Plan.id.asc()).all()
    return jsonify([p.to_dict() for p in rows]), 200


@bp.route('/plans', methods=['POST'])
@super_admin_required
def create_plan():
    data = plan_schema.load(request.get_json(silent=True) or {})
    plan = Plan(**data)
    db.session.add(plan)
    db.session.commit()
    return jsonify(plan.to_dict()), 201


@bp.route('/plans/<int:plan_id>', methods=['PUT'])
@super_admin_required
def update_plan(plan_id):
    data = plan_schema.load(request.get_json(silent=True) or {})
    plan = db.session.get(Plan, plan_id)
    if not plan:
        raise NotFoundError("Plano não encontrado.")

    for key, value in data.items():
        setattr(plan, key, value)
    db.session.commit()
    return jsonify(plan.to_dict()), 200


@bp.route('/plans/<int:plan_id>', methods=['DELETE'])
@super_admin_required
def delete_plan(plan_id):
    deleted = Plan.query.filter_by(id=plan_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Plano não encontrado.")
    db.session.commit()
    return jsonify({"message": "Plano removido."}), 200


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

@bp.route('/stats', methods=['GET'])
@super_admin_required
def platform_stats():
    """Platform-wide counters for the admin console."""
    total_tenants = db.session.query(func.count(Tenant.id)).scalar()
    active_tenants = db.session.query(func.count(Tenant.id)).filter(Tenant.active.is_(True)).scalar()
    total_users = db.session.query(func.count(User.id)).scalar()
    total_transactions = db.session.query(func.count(Transaction.id)).scalar()
    ai_usage = db.session.query(func.coalesce(func.sum(Tenant.ai_usage_current), 0)).scalar()
    by_plan = (
        db.session.query(Tenant.plan_tier, func.count(Tenant.id))
        .group_by(Tenant.plan_tier)
        .order_by(Tenant.plan_tier.asc())
        .all()
    )

    return jsonify({
        "tenants": {"total": int(total_tenants or 0), "active": int(active_tenants or 0)},
        "users": {"total": int(total_users or 0)},
        "transactions": {"total": int(total_transactions or 0)},
        "ai_usage": {"total": int(ai_usage or 0)},
        "plans": [{"plan_tier": tier, "tenants": count} for tier, count in by_plan],
    }), 200
