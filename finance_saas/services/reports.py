"""
Reporting Aggregator

Grouped aggregations over the ledger. All date handling uses SQLAlchemy
expressions (case / extract / range filters), so the same queries run on
PostgreSQL and SQLite.
"""
from datetime import date, timedelta

from sqlalchemy import and_, case, extract, func

from finance_saas.extensions import db
from finance_saas.models.category import Category
from finance_saas.models.client import Client
from finance_saas.models.product import Product
from finance_saas.models.service_order import ServiceOrder
from finance_saas.models.transaction import Transaction
from finance_saas.models.user import User
from finance_saas.services.recurring import add_months

MONTH_LABELS = (
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
)
UNCATEGORIZED = 'Sem Categoria'
CHART_DAYS = 30


def _money(value):
    return float(value or 0)


def _sum_where(*conditions):
    return func.coalesce(func.sum(case((and_(*conditions), Transaction.amount), else_=0)), 0)


def month_bounds(today):
    start = today.replace(day=1)
    return start, add_months(start, 1)


def dashboard_summary(tenant_id, today=None):
    """
    Current calendar month totals. income/expense/balance count completed
    transactions only; pending amounts are reported separately.
    """
    today = today or date.today()
    start, end = month_bounds(today)

    row = (
        db.session.query(
            _sum_where(Transaction.type == 'income', Transaction.status == 'completed').label('income'),
            _sum_where(Transaction.type == 'expense', Transaction.status == 'completed').label('expense'),
            _sum_where(Transaction.type == 'income', Transaction.status == 'pending').label('pending_income'),
            _sum_where(Transaction.type == 'expense', Transaction.status == 'pending').label('pending_expense'),
            func.count(Transaction.id).label('count'),
        )
        .filter(
            Transaction.tenant_id == tenant_id,
            Transaction.date >= start,
            Transaction.date < end,
        )
        .one()
    )

    income = _money(row.income)
    expense = _money(row.expense)
    return {
        "period": "current_month",
        "income": income,
        "expense": expense,
        "pending_income": _money(row.pending_income),
        "pending_expense": _money(row.pending_expense),
        "balance": income - expense,
        "transaction_count": int(row.count or 0),
    }


def monthly_statement(tenant_id, year):
    """
    DRE: completed income/expense per month of ``year``. Always 12 entries,
    zero-filled, plus yearly totals.
    """
    month_col = extract('month', Transaction.date)
    rows = (
        db.session.query(
            month_col.label('month'),
            _sum_where(Transaction.type == 'income').label('income'),
            _sum_where(Transaction.type == 'expense').label('expense'),
        )
        .filter(
            Transaction.tenant_id == tenant_id,
            Transaction.status == 'completed',
            Transaction.date >= date(year, 1, 1),
            Transaction.date <= date(year, 12, 31),
        )
        .group_by(month_col)
        .all()
    )
    by_month = {int(r.month): r for r in rows}

    monthly = []
    totals = {"income": 0.0, "expense": 0.0, "result": 0.0}
    for index in range(12):
        found = by_month.get(index + 1)
        income = _money(found.income) if found else 0.0
        expense = _money(found.expense) if found else 0.0
        monthly.append({
            "month": f"{index + 1:02d}",
            "monthLabel": MONTH_LABELS[index],
            "income": income,
            "expense": expense,
            "result": income - expense,
        })
        totals["income"] += income
        totals["expense"] += expense
        totals["result"] += income - expense

    return {"year": year, "monthly": monthly, "totals": totals}


def category_breakdown(tenant_id, type_, month, year):
    total = func.sum(Transaction.amount)
    rows = (
        db.session.query(Category.name.label('name'), total.label('total'))
        .select_from(Transaction)
        .outerjoin(Category, Transaction.category_id == Category.id)
        .filter(
            Transaction.tenant_id == tenant_id,
            Transaction.type == type_,
            Transaction.status == 'completed',
            extract('month', Transaction.date) == month,
            extract('year', Transaction.date) == year,
        )
        .group_by(Category.name)
        .order_by(total.desc())
        .all()
    )
    return [{"name": r.name or UNCATEGORIZED, "total": _money(r.total)} for r in rows]


def financial_extract(tenant_id, start_date=None, end_date=None):
    """Every transaction with category, client and creator names, newest first."""
    query = (
        db.session.query(
            Transaction,
            Category.name.label('category_name'),
            Client.name.label('client_name'),
            User.name.label('created_by_name'),
        )
        .outerjoin(Category, Transaction.category_id == Category.id)
        .outerjoin(Client, Transaction.client_id == Client.id)
        .outerjoin(User, Transaction.created_by == User.id)
        .filter(Transaction.tenant_id == tenant_id)
    )
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)

    rows = query.order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()).all()

    extract_rows = []
    for transaction, category_name, client_name, created_by_name in rows:
        extract_rows.append({
            "id": transaction.id,
            "competence_date": transaction.date.isoformat(),
            "registration_date": transaction.created_at.isoformat() if transaction.created_at else None,
            "description": transaction.description,
            "amount": _money(transaction.amount),
            "type": transaction.type,
            "status": transaction.status,
            "category_name": category_name,
            "client_name": client_name,
            "created_by_name": created_by_name,
            "attachment_path": transaction.attachment_path,
        })
    return extract_rows


def chart_series(tenant_id, today=None, days=CHART_DAYS):
    """Daily completed income/expense over the last ``days`` days, ascending."""
    today = today or date.today()
    rows = (
        db.session.query(
            Transaction.date.label('day'),
            _sum_where(Transaction.type == 'income').label('income'),
            _sum_where(Transaction.type == 'expense').label('expense'),
        )
        .filter(
            Transaction.tenant_id == tenant_id,
            Transaction.status == 'completed',
            Transaction.date >= today - timedelta(days=days),
            Transaction.date <= today,
        )
        .group_by(Transaction.date)
        .order_by(Transaction.date.asc())
        .all()
    )
    return [
        {"name": r.day.strftime('%d/%m'), "income": _money(r.income), "expense": _money(r.expense)}
        for r in rows
    ]


def general_stats(tenant_id, today=None):
    """Home dashboard: month finance, service-order load, stock alerts, client count."""
    summary = dashboard_summary(tenant_id, today)

    os_row = (
        db.session.query(
            func.coalesce(func.sum(case((ServiceOrder.status.in_(('open', 'in_progress')), 1), else_=0)), 0).label('open'),
            func.coalesce(func.sum(case(
                (and_(ServiceOrder.priority == 'high', ServiceOrder.status != 'completed'), 1), else_=0
            )), 0).label('critical'),
        )
        .filter(ServiceOrder.tenant_id == tenant_id)
        .one()
    )
    low_stock = (
        db.session.query(func.count(Product.id))
        .filter(Product.tenant_id == tenant_id, Product.stock <= Product.min_stock)
        .scalar()
    )
    total_clients = db.session.query(func.count(Client.id)).filter(Client.tenant_id == tenant_id).scalar()

    return {
        "finance": {
            "income": summary["income"],
            "expense": summary["expense"],
            "balance": summary["balance"],
        },
        "os": {"open": int(os_row.open or 0), "critical": int(os_row.critical or 0)},
        "stock": {"low": int(low_stock or 0)},
        "clients": {"total": int(total_clients or 0)},
    }


