"""
Plan limits: user seats and AI usage.
"""
import logging

from sqlalchemy import func

from finance_saas.errors import NotFoundError, PlanLimitError
from finance_saas.extensions import db
from finance_saas.models.plan import Plan
from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User

logger = logging.getLogger(__name__)


def ensure_user_seat_available(tenant):
    current_users = db.session.query(func.count(User.id)).filter(User.tenant_id == tenant.id).scalar()
    if current_users >= tenant.max_users:
        raise PlanLimitError(
            f"Limite de usuários atingido ({tenant.max_users}). Faça um upgrade no plano."
        )


def consume_ai_credit(tenant_id):
    """
    Atomically take one AI call from the tenant's allowance.

    Returns:
        bool: False when the allowance is exhausted (nothing consumed)
    """
    consumed = (
        Tenant.query
        .filter(Tenant.id == tenant_id, Tenant.ai_usage_current < Tenant.ai_usage_limit)
        .update({Tenant.ai_usage_current: Tenant.ai_usage_current + 1}, synchronize_session=False)
    )
    db.session.commit()
    if not consumed:
        logger.info("AI allowance exhausted: tenant_id=%s", tenant_id)
    return bool(consumed)


def apply_plan_to_tenant(tenant, plan_id=None, plan_tier=None, max_users=None, ai_usage_limit=None, active=None):
    """
    Apply a Plan template (plan_id) and/or explicit overrides to ``tenant``.
    Explicit values win over the template. Caller commits.
    """
    if plan_id is not None:
        plan = db.session.get(Plan, plan_id)
        if not plan:
            raise NotFoundError("Plano não encontrado.")
        tenant.plan_tier = plan.name
        tenant.max_users = plan.max_users
        tenant.ai_usage_limit = plan.ai_usage_limit

    if plan_tier is not None:
        tenant.plan_tier = plan_tier
    if max_users is not None:
        tenant.max_users = max_users
    if ai_usage_limit is not None:
        tenant.ai_usage_limit = ai_usage_limit
    if active is not None:
        tenant.active = active
    return tenant
