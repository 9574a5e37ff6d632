from finance_saas.extensions import db
from datetime import datetime


class Tenant(db.Model):
    __tablename__ = 'tenants'

    """
    Tenant Model - One customer organisation using the SaaS.

    Every operational row (users, transactions, clients, products...) carries
    tenant_id. Deleting a tenant deletes all of its data through the ORM
    cascades below.

    Attributes:
        id (int): Primary key
        name (str): Company name
        slug (str): Unique public identifier chosen at registration
        plan_tier (str): Name of the plan currently applied ('basic' by default)
        active (bool): Soft-disable flag; inactive tenants cannot log in
        max_users (int): Plan limit on users
        ai_usage_limit (int): Plan limit on AI calls
        ai_usage_current (int): AI calls consumed so far
        closing_day (int): Day of month the books are closed (1-31)
    """

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    plan_tier = db.Column(db.String(50), nullable=False, default='basic')
    active = db.Column(db.Boolean, nullable=False, default=True)
    max_users = db.Column(db.Integer, nullable=False, default=5)
    ai_usage_limit = db.Column(db.Integer, nullable=False, default=100)
    ai_usage_current = db.Column(db.Integer, nullable=False, default=0)
    closing_day = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships - deleting a tenant deletes all of its data
    users = db.relationship('User', backref='tenant', cascade='all, delete-orphan')
    categories = db.relationship('Category', backref='tenant', cascade='all, delete-orphan')
    clients = db.relationship('Client', backref='tenant', cascade='all, delete-orphan')
    products = db.relationship('Product', backref='tenant', cascade='all, delete-orphan')
    transactions = db.relationship('Transaction', backref='tenant', cascade='all, delete-orphan')
    recurring_rules = db.relationship('RecurringRule', backref='tenant', cascade='all, delete-orphan')
    service_orders = db.relationship('ServiceOrder', backref='tenant', cascade='all, delete-orphan')
    notifications = db.relationship('Notification', backref='tenant', cascade='all, delete-orphan')
    audit_logs = db.relationship('AuditLogEntry', backref='tenant', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "plan_tier": self.plan_tier,
            "active": self.active,
            "max_users": self.max_users,
            "ai_usage_limit": self.ai_usage_limit,
            "ai_usage_current": self.ai_usage_current,
            "closing_day": self.closing_day,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
