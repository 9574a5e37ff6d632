from finance_saas.extensions import db
from datetime import datetime


class Product(db.Model):
    __tablename__ = 'products'

    """
    Product Model - Stock item. stock <= min_stock means "low stock".
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    sale_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    cost_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    min_stock = db.Column(db.Integer, nullable=False, default=5)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_low_stock(self):
        return (self.stock or 0) <= (self.min_stock or 0)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "description": self.description,
            "sale_price": float(self.sale_price or 0),
            "cost_price": float(self.cost_price or 0),
            "stock": self.stock,
            "min_stock": self.min_stock,
            "low_stock": self.is_low_stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
