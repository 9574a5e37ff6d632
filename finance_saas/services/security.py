"""
Credential & Token Service

Password hashing, session-token issuance and the two authorisation gates
every blueprint relies on (authenticated tenant member, super-admin).
"""
from functools import wraps

from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.security import generate_password_hash, check_password_hash

from finance_saas.errors import AuthError, AuthorizationError

# Canonical claim names carried by every token
CLAIM_TENANT_ID = 'tenantId'
CLAIM_ROLE = 'role'
CLAIM_SUPER_ADMIN = 'isSuperAdmin'


def hash_password(password):
    """Salted adaptive hash (werkzeug default: scrypt)."""
    return generate_password_hash(password)


def verify_password(password, password_hash):
    if not password or not password_hash:
        return False
    return check_password_hash(password_hash, password)


def issue_token(user):
    """
    Issue a 24h access token for ``user``.

    The identity is the user id; tenant, role and super-admin flag travel as
    additional claims so request handlers never need to reload the user.
    """
    return create_access_token(
        identity=str(user.id),
        additional_claims={
            CLAIM_TENANT_ID: user.tenant_id,
            CLAIM_ROLE: user.role,
            CLAIM_SUPER_ADMIN: bool(user.is_super_admin),
        }
    )


def current_user_id():
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        raise AuthError("Token inválido.")


def current_tenant_id():
    tenant_id = get_jwt().get(CLAIM_TENANT_ID)
    if tenant_id is None:
        raise AuthError("Token sem empresa associada.")
    return tenant_id


def current_role():
    return get_jwt().get(CLAIM_ROLE)


def is_super_admin():
    return get_jwt().get(CLAIM_SUPER_ADMIN) is True


def tenant_required(fn):
    """Require a valid token that carries a tenant claim."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        current_tenant_id()
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    """Require a tenant admin (role == 'admin')."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        current_tenant_id()
        if current_role() != 'admin':
            raise AuthorizationError("Apenas administradores podem realizar esta ação.")
        return fn(*args, **kwargs)
    return wrapper


def super_admin_required(fn):
    """Require the super-admin claim."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if not is_super_admin():
            raise AuthorizationError("Acesso negado. Apenas Super Admins podem realizar esta ação.")
        return fn(*args, **kwargs)
    return wrapper
