"""
Service-Order Billing

Completing a service order and posting its revenue transaction happen in
one database transaction. The status change is a conditional update, so two
concurrent bill requests cannot both succeed.
"""
import logging
from datetime import date, datetime

from finance_saas.errors import ConflictError, NotFoundError
from finance_saas.extensions import db
from finance_saas.models.service_order import ServiceOrder
from finance_saas.models.transaction import Transaction

logger = logging.getLogger(__name__)


def billing_description(order):
    return f"Serviço OS #{order.id} - {order.client_name}"


def bill_service_order(tenant_id, order_id, user_id=None):
    """
    Mark the order completed and post an income transaction for its price.

    Raises:
        NotFoundError: order missing or owned by another tenant
        ConflictError: order already completed (duplicate billing)

    Returns:
        Transaction: The posted revenue entry
    """
    try:
        order = ServiceOrder.query.filter_by(id=order_id, tenant_id=tenant_id).first()
        if not order:
            raise NotFoundError("OS não encontrada.")
        if order.status == 'completed':
            raise ConflictError("Esta OS já foi finalizada.")

        completed = (
            ServiceOrder.query
            .filter(
                ServiceOrder.id == order_id,
                ServiceOrder.tenant_id == tenant_id,
                ServiceOrder.status != 'completed',
            )
            .update(
                {ServiceOrder.status: 'completed', ServiceOrder.updated_at: datetime.utcnow()},
                synchronize_session=False,
            )
        )
        if completed == 0:
            # Another request billed it between our read and the update
            raise ConflictError("Esta OS já foi finalizada.")

        transaction = Transaction(
            tenant_id=tenant_id,
            description=billing_description(order),
            amount=order.price,
            type='income',
            cost_type='variable',
            status='completed',
            date=date.today(),
            created_by=user_id,
        )
        db.session.add(transaction)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Service order billed: tenant_id=%s order_id=%s transaction_id=%s",
        tenant_id, order_id, transaction.id
    )
    return transaction
