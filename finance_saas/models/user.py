from finance_saas.extensions import db
from datetime import datetime


class User(db.Model):
    __tablename__ = 'users'

    """
    User Model - A person who logs into a tenant.

    Attributes:
        id (int): Primary key
        tenant_id (int): Owning tenant
        name (str): Display name
        email (str): Login email (unique across the entire system)
        password_hash (str): Salted hash, never the plaintext
        role (str): 'admin' or 'user'
        is_super_admin (bool): Can manage every tenant from the admin console
        avatar_path (str): URL returned by the upload endpoint
        reset_token / reset_token_expires: Pending password-reset request
    """

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='user')
    is_super_admin = db.Column(db.Boolean, nullable=False, default=False)
    avatar_path = db.Column(db.Text, nullable=True)
    reset_token = db.Column(db.String(128), nullable=True, index=True)
    reset_token_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "is_super_admin": self.is_super_admin,
            "avatar": self.avatar_path,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
