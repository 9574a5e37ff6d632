import secrets
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import IntegrityError

from finance_saas.errors import AuthError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from finance_saas.extensions import db
from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User
from finance_saas.schemas.auth_schema import (
    RegisterSchema,
    LoginSchema,
    ForgotPasswordSchema,
    ResetPasswordSchema,
    ProfileUpdateSchema,
)
from finance_saas.services.provisioning import provision_tenant
from finance_saas.services.security import (
    hash_password,
    verify_password,
    issue_token,
    current_user_id,
    tenant_required,
)

# Create Blueprint
bp = Blueprint('auth', __name__)

# Initialize schemas
register_schema = RegisterSchema()
login_schema = LoginSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
profile_schema = ProfileUpdateSchema()

FORGOT_PASSWORD_MESSAGE = 'Se o email estiver cadastrado, você receberá um link de recuperação.'


@bp.route('/register', methods=['POST'])
def register():
    """
    Company Registration Endpoint

    Creates a new tenant and its admin user in one transaction, then logs
    the admin in.

    Request Body:
        {
            "companyName": "Acme",
            "slug": "acme",
            "name": "Ana",
            "email": "ana@acme.com",
            "password": "secret"
        }

    Returns:
        201: token + user
        400: Validation error
        409: Slug or email already in use
    """
    data = register_schema.load(request.get_json(silent=True) or {})

    tenant, user = provision_tenant(
        company_name=data['company_name'],
        slug=data['slug'],
        admin_name=data['name'],
        email=data['email'],
        password=data['password'],
    )

    return jsonify({
        "message": "Empresa registrada com sucesso!",
        "token": issue_token(user),
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "tenantId": tenant.id,
            "companyName": tenant.name,
        }
    }), 201


@bp.route('/login', methods=['POST'])
def login():
    """
    Login Endpoint

    Responses:
      200 token + user
      401 wrong email or password
      403 tenant deactivated
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    user = User.query.filter_by(email=data['email']).first()
    if not user or not verify_password(data['password'], user.password_hash):
        current_app.logger.info("Login failed for email=%s", data['email'])
        raise AuthError("Credenciais inválidas")

    tenant = db.session.get(Tenant, user.tenant_id)
    if not tenant.active:
        raise AuthorizationError("Esta empresa está desativada. Entre em contato com o suporte.")

    return jsonify({
        "message": "Login realizado com sucesso",
        "token": issue_token(user),
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "isSuperAdmin": bool(user.is_super_admin),
            "avatar": user.avatar_path,
            "tenantId": tenant.id,
            "tenantName": tenant.name,
        }
    }), 200


@bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """
    Start a password reset. Always answers 200 so the endpoint cannot be
    used to probe which emails are registered.
    """
    data = forgot_schema.load(request.get_json(silent=True) or {})

    user = User.query.filter_by(email=data['email']).first()
    if user:
        token = secrets.token_urlsafe(32)
        user.reset_token = token
        user.reset_token_expires = datetime.utcnow() + current_app.config['PASSWORD_RESET_EXPIRES']
        db.session.commit()

        from finance_saas.tasks.email_tasks import send_password_reset_email
        try:
            send_password_reset_email.delay(user.id, token)
        except Exception as e:
            # Token is stored; the user can simply ask again
            current_app.logger.error("Failed to queue password reset email for user_id=%s: %s", user.id, e)

    return jsonify({"message": FORGOT_PASSWORD_MESSAGE}), 200


@bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = reset_schema.load(request.get_json(silent=True) or {})

    user = User.query.filter_by(reset_token=data['token']).first()
    if not user or not user.reset_token_expires or user.reset_token_expires < datetime.utcnow():
        raise ValidationError("Token inválido ou expirado.")

    user.password_hash = hash_password(data['password'])
    user.reset_token = None
    user.reset_token_expires = None
    db.session.commit()

    current_app.logger.info("Password reset completed for user_id=%s", user.id)
    return jsonify({"message": "Senha redefinida com sucesso."}), 200


@bp.route('/profile', methods=['GET'])
@tenant_required
def get_profile():
    user = db.session.get(User, current_user_id())
    if not user:
        raise NotFoundError("Usuário não encontrado.")
    return jsonify({"user": user.to_dict()}), 200


@bp.route('/profile', methods=['PUT'])
@tenant_required
def update_profile():
    """
    Update name, email, avatar and/or password of the logged-in user.

    Request Body (all optional):
        {"name", "email", "avatar", "currentPassword", "newPassword"}
    """
    data = profile_schema.load(request.get_json(silent=True) or {})
    user = db.session.get(User, current_user_id())
    if not user:
        raise NotFoundError("Usuário não encontrado.")

    if 'email' in data and data['email'] != user.email:
        taken = User.query.filter(User.email == data['email'], User.id != user.id).first()
        if taken:
            raise ConflictError("Este email já está em uso.")
        user.email = data['email']

    if 'name' in data:
        user.name = data['name']
    if 'avatar_path' in data:
        user.avatar_path = data['avatar_path']

    if data.get('new_password'):
        if not verify_password(data['current_password'], user.password_hash):
            raise ValidationError("Senha atual incorreta.")
        user.password_hash = hash_password(data['new_password'])

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Este email já está em uso.")
    return jsonify({"message": "Perfil atualizado com sucesso!", "user": user.to_dict()}), 200
