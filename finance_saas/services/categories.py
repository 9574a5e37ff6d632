"""
Category resolution for transaction creation.
"""
import logging

from sqlalchemy.exc import IntegrityError

from finance_saas.extensions import db
from finance_saas.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'Geral'


def find_category(tenant_id, name, type_):
    return Category.query.filter_by(tenant_id=tenant_id, name=name, type=type_).first()


def get_or_create_category(tenant_id, name, type_):
    """
    Return the tenant's category with exactly this name and type, creating it
    if needed.

    The insert runs inside a SAVEPOINT; if a concurrent request created the
    same category first, the unique constraint fires and the existing row is
    returned instead.
    """
    name = (name or '').strip() or DEFAULT_CATEGORY
    existing = find_category(tenant_id, name, type_)
    if existing:
        return existing

    try:
        with db.session.begin_nested():
            category = Category(tenant_id=tenant_id, name=name, type=type_)
            db.session.add(category)
        return category
    except IntegrityError:
        logger.debug("Category created concurrently: tenant_id=%s name=%s type=%s", tenant_id, name, type_)
        return find_category(tenant_id, name, type_)
