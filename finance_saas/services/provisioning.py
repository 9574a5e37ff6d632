"""
Tenant Provisioning

Creates a tenant and its first admin user as one atomic unit. The slug and
email pre-checks give friendly errors; the unique constraints on
``tenants.slug`` and ``users.email`` are the final arbiter when two
registrations race.
"""
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from finance_saas.errors import ConflictError
from finance_saas.extensions import db
from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User
from finance_saas.services.security import hash_password

logger = logging.getLogger(__name__)


def slug_taken(slug):
    return db.session.query(Tenant.id).filter(Tenant.slug == slug).first() is not None


def email_taken(email):
    return db.session.query(User.id).filter(User.email == email).first() is not None


def provision_tenant(company_name, slug, admin_name, email, password, plan=None):
    """
    Create Tenant + admin User, all or nothing.

    Args:
        company_name: Tenant display name
        slug: Unique tenant identifier (exact, case-sensitive match)
        admin_name / email / password: First admin user
        plan: Optional Plan whose limits are applied instead of the defaults

    Returns:
        tuple: (tenant, user), both committed

    Raises:
        ConflictError: slug or email already in use
    """
    try:
        # Step 1: Slug must be free
        if slug_taken(slug):
            raise ConflictError("Este identificador de empresa (slug) já está em uso.")

        # Step 2: Email is unique across the whole system
        if email_taken(email):
            raise ConflictError("Este email já está em uso.")

        # Step 3: Create tenant with default (or chosen) plan
        config = current_app.config
        tenant = Tenant(
            name=company_name,
            slug=slug,
            plan_tier=plan.name if plan else config['DEFAULT_PLAN_TIER'],
            max_users=plan.max_users if plan else config['DEFAULT_MAX_USERS'],
            ai_usage_limit=plan.ai_usage_limit if plan else config['DEFAULT_AI_USAGE_LIMIT'],
            active=True,
        )
        db.session.add(tenant)
        db.session.flush()  # Generates tenant.id without committing

        # Step 4: Admin user bound to the new tenant
        user = User(
            tenant_id=tenant.id,
            name=admin_name,
            email=email,
            password_hash=hash_password(password),
            role='admin',
            is_super_admin=False,
        )
        db.session.add(user)

        # Step 5: Commit both rows together
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Tenant provisioning lost a uniqueness race: slug=%s email=%s (%s)", slug, email, exc.orig)
        raise ConflictError("Dados duplicados (Email ou Slug).")
    except Exception:
        db.session.rollback()
        raise

    logger.info("Tenant provisioned: tenant_id=%s slug=%s admin_user_id=%s", tenant.id, slug, user.id)
    return tenant, user
