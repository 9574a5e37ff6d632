from finance_saas.extensions import db
from datetime import datetime


class Plan(db.Model):
    __tablename__ = 'plans'

    """
    Plan Model - Template of limits a super-admin applies to tenants.
    Not tenant scoped.
    """

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    max_users = db.Column(db.Integer, nullable=False, default=5)
    ai_usage_limit = db.Column(db.Integer, nullable=False, default=100)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "max_users": self.max_users,
            "ai_usage_limit": self.ai_usage_limit,
            "price": float(self.price or 0),
            "active": self.active,
        }
