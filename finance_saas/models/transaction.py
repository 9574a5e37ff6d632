from finance_saas.extensions import db
from datetime import datetime


class Transaction(db.Model):
    __tablename__ = 'transactions'

    """
    Transaction Model - The ledger entry every report aggregates over.

    Attributes:
        amount (Decimal): Always positive; direction comes from type
        type (str): 'income' | 'expense'
        cost_type (str): 'fixed' | 'variable'
        status (str): 'pending' | 'completed'
        date (date): Competence/due date used by reporting
        attachment_path (str): URL returned by the upload endpoint
        created_by (int): User that recorded the entry
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)
    client_id = db.Column(db.Integer, db.ForeignKey('clients.id', ondelete='SET NULL'), nullable=True)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    cost_type = db.Column(db.String(20), nullable=False, default='variable')
    status = db.Column(db.String(20), nullable=False, default='completed')
    date = db.Column(db.Date, nullable=False, index=True)
    attachment_path = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    category = db.relationship('Category')

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "category_id": self.category_id,
            "category_name": self.category.name if self.category else None,
            "client_id": self.client_id,
            "description": self.description,
            "amount": float(self.amount or 0),
            "type": self.type,
            "cost_type": self.cost_type,
            "status": self.status,
            "date": self.date.isoformat() if self.date else None,
            "attachment_path": self.attachment_path,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
