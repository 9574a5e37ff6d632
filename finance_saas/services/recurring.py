"""
Recurring Billing Processor

Materialises due recurring rules into pending ledger transactions and rolls
each rule's next_run forward by its frequency.
"""
import calendar
import logging
from collections import namedtuple
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError

from finance_saas.extensions import db
from finance_saas.models.recurring_rule import RecurringRule
from finance_saas.models.tenant import Tenant
from finance_saas.models.transaction import Transaction

logger = logging.getLogger(__name__)

FREQUENCIES = ('weekly', 'monthly', 'yearly')
RECURRING_SUFFIX = ' (Recorrente)'

DueRule = namedtuple('DueRule', 'id description amount type frequency next_run category_id')


def add_months(d, months):
    """Calendar-aware month addition; the day is clamped to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_interval(d, frequency):
    """
    Next occurrence after ``d``.

    >>> add_interval(date(2024, 1, 31), 'monthly')
    datetime.date(2024, 2, 29)
    """
    if frequency == 'weekly':
        return d + timedelta(days=7)
    if frequency == 'monthly':
        return add_months(d, 1)
    if frequency == 'yearly':
        return add_months(d, 12)
    raise ValueError(f"Unknown frequency: {frequency}")


def due_rules(tenant_id, today):
    return (
        RecurringRule.query
        .filter(
            RecurringRule.tenant_id == tenant_id,
            RecurringRule.active.is_(True),
            RecurringRule.next_run <= today,
        )
        .order_by(RecurringRule.next_run.asc(), RecurringRule.id.asc())
        .all()
    )


def _process_rule(rule, tenant_id, user_id):
    """
    Claim the rule by advancing next_run with a conditional update, then post
    the transaction. Returns False when another run already claimed it.
    """
    run_date = rule.next_run
    next_run = add_interval(run_date, rule.frequency)

    claimed = (
        RecurringRule.query
        .filter(
            RecurringRule.id == rule.id,
            RecurringRule.tenant_id == tenant_id,
            RecurringRule.next_run == run_date,
        )
        .update({RecurringRule.next_run: next_run}, synchronize_session=False)
    )
    if claimed == 0:
        db.session.rollback()
        return False

    db.session.add(Transaction(
        tenant_id=tenant_id,
        category_id=rule.category_id,
        description=f"{rule.description}{RECURRING_SUFFIX}",
        amount=rule.amount,
        type=rule.type,
        cost_type='fixed',
        status='pending',
        date=run_date,
        created_by=user_id,
    ))
    db.session.commit()
    return True


def process_due_rules(tenant_id, user_id=None, today=None):
    """
    Post one transaction for every due rule of ``tenant_id``.

    Each rule is its own unit of work: a failure rolls back that rule only
    and processing continues with the next one.

    Returns:
        int: Number of rules processed
    """
    today = today or date.today()
    # Plain values survive the per-rule commits/rollbacks below
    snapshots = [
        DueRule(r.id, r.description, r.amount, r.type, r.frequency, r.next_run, r.category_id)
        for r in due_rules(tenant_id, today)
    ]

    processed = 0
    for rule in snapshots:
        try:
            if _process_rule(rule, tenant_id, user_id):
                processed += 1
        except (SQLAlchemyError, ValueError) as exc:
            db.session.rollback()
            logger.error(
                "Recurring rule failed: tenant_id=%s rule_id=%s error=%s",
                tenant_id, rule.id, exc
            )

    logger.info("Recurring processing done: tenant_id=%s processed=%d due=%d", tenant_id, processed, len(snapshots))
    return processed


def process_all_tenants(today=None):
    """Run ``process_due_rules`` for every active tenant. Used by the scheduled task."""
    tenant_ids = [row.id for row in db.session.query(Tenant.id).filter(Tenant.active.is_(True)).all()]
    results = {}
    for tenant_id in tenant_ids:
        results[tenant_id] = process_due_rules(tenant_id, today=today)
    return results
