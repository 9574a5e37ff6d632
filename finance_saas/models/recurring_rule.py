from finance_saas.extensions import db
from datetime import datetime


class RecurringRule(db.Model):
    __tablename__ = 'recurring_transactions'

    """
    RecurringRule Model - Template that materialises into Transactions.

    next_run is the competence date of the next transaction to post; the
    processor advances it by frequency ('weekly' | 'monthly' | 'yearly').
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    type = db.Column(db.String(20), nullable=False, default='expense')
    frequency = db.Column(db.String(20), nullable=False, default='monthly')
    start_date = db.Column(db.Date, nullable=False)
    next_run = db.Column(db.Date, nullable=False, index=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "category_id": self.category_id,
            "description": self.description,
            "amount": float(self.amount or 0),
            "type": self.type,
            "frequency": self.frequency,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "next_run": self.next_run.isoformat() if self.next_run else None,
            "active": self.active,
        }
