from finance_saas.extensions import db
from datetime import datetime


class ServiceOrder(db.Model):
    __tablename__ = 'service_orders'

    """
    ServiceOrder Model - Repair/service job for a client.

    status: 'open' | 'in_progress' | 'waiting' | 'completed'. Completion is
    one-way and happens only through billing, which also posts the revenue
    Transaction.
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    client_name = db.Column(db.String(255), nullable=False)
    equipment = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True, default='')
    priority = db.Column(db.String(20), nullable=False, default='normal')
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='open')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "client_name": self.client_name,
            "equipment": self.equipment,
            "description": self.description,
            "priority": self.priority,
            "price": float(self.price or 0),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
