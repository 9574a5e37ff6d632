from finance_saas.extensions import db
from datetime import datetime


class Client(db.Model):
    __tablename__ = 'clients'

    """
    Client Model - A customer, a supplier, or both ('client' | 'supplier' | 'both').
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    document = db.Column(db.String(50), nullable=True)
    address = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(20), nullable=False, default='client')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "document": self.document,
            "address": self.address,
            "type": self.type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
