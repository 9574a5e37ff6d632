"""
Notification Generator

Alerts are generated lazily whenever a tenant lists its notifications. Each
alert family is created at most once per tenant per calendar day (checked by
title prefix and created_at).
"""
import logging
from datetime import date, datetime, time

from sqlalchemy import func

from finance_saas.extensions import db
from finance_saas.models.notification import Notification
from finance_saas.models.product import Product
from finance_saas.models.transaction import Transaction

logger = logging.getLogger(__name__)

STOCK_ALERT_PREFIX = 'Alerta de Estoque'
BILLS_DUE_PREFIX = 'Contas Vencendo'
LIST_LIMIT = 20


def start_of_today():
    return datetime.combine(datetime.utcnow().date(), time.min)


def low_stock_count(tenant_id):
    return (
        db.session.query(func.count(Product.id))
        .filter(Product.tenant_id == tenant_id, Product.stock <= Product.min_stock)
        .scalar()
    ) or 0


def bills_due_count(tenant_id, today=None):
    today = today or date.today()
    return (
        db.session.query(func.count(Transaction.id))
        .filter(
            Transaction.tenant_id == tenant_id,
            Transaction.type == 'expense',
            Transaction.status == 'pending',
            Transaction.date <= today,
        )
        .scalar()
    ) or 0


def alert_exists_today(tenant_id, title_prefix):
    return (
        Notification.query
        .filter(
            Notification.tenant_id == tenant_id,
            Notification.title.like(f"{title_prefix}%"),
            Notification.created_at >= start_of_today(),
        )
        .first()
    ) is not None


def generate_alerts(tenant_id, today=None):
    """
    Create today's stock / bills-due alerts if their condition holds and they
    were not created yet today.

    Returns:
        list: Notifications created by this call
    """
    created = []

    stock_count = low_stock_count(tenant_id)
    if stock_count > 0 and not alert_exists_today(tenant_id, STOCK_ALERT_PREFIX):
        created.append(Notification(
            tenant_id=tenant_id,
            title=f"{STOCK_ALERT_PREFIX} ({stock_count})",
            message=f"Você tem {stock_count} produtos abaixo do mínimo.",
            type='warning',
        ))

    bills_count = bills_due_count(tenant_id, today)
    if bills_count > 0 and not alert_exists_today(tenant_id, BILLS_DUE_PREFIX):
        created.append(Notification(
            tenant_id=tenant_id,
            title=f"{BILLS_DUE_PREFIX} ({bills_count})",
            message=f"Existem {bills_count} contas para pagar hoje ou atrasadas.",
            type='error',
        ))

    if created:
        db.session.add_all(created)
        db.session.commit()
        logger.info("Notifications generated: tenant_id=%s count=%d", tenant_id, len(created))
    return created


def list_notifications(tenant_id, limit=LIST_LIMIT):
    generate_alerts(tenant_id)
    return (
        Notification.query
        .filter_by(tenant_id=tenant_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def mark_as_read(tenant_id, notification_id):
    """Returns the number of rows updated (0 when not owned by the tenant)."""
    updated = (
        Notification.query
        .filter_by(id=notification_id, tenant_id=tenant_id)
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.session.commit()
    return updated


def mark_all_read(tenant_id):
    updated = (
        Notification.query
        .filter_by(tenant_id=tenant_id, is_read=False)
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.session.commit()
    return updated
