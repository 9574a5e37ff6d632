from marshmallow import fields, validate, validates_schema, ValidationError

from finance_saas.schemas.base import BaseSchema

PASSWORD_MIN_LENGTH = 6


class RegisterSchema(BaseSchema):
    """
    Registration Request Validation Schema

    Creates a company (tenant) and its first admin user. Accepts the
    frontend's camelCase ``companyName`` as well as ``company_name``.

    Example:
        schema = RegisterSchema()
        result = schema.load(request_data)
    """
    aliases = {'companyName': 'company_name', 'adminName': 'name'}

    company_name = fields.Str(required=True, validate=validate.Length(min=2, max=255), error_messages={
        "required": "Nome da empresa é obrigatório"
    })
    slug = fields.Str(required=True, validate=validate.Length(min=2, max=100), error_messages={
        "required": "Identificador (slug) é obrigatório"
    })
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Nome é obrigatório"
    })
    email = fields.Email(required=True, error_messages={
        "required": "Email é obrigatório",
        "invalid": "Formato de email inválido"
    })
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH), error_messages={
        "required": "Senha é obrigatória"
    })


class LoginSchema(BaseSchema):
    email = fields.Str(required=True, error_messages={"required": "Email e senha são obrigatórios"})
    password = fields.Str(required=True, load_only=True, error_messages={"required": "Email e senha são obrigatórios"})


class ForgotPasswordSchema(BaseSchema):
    email = fields.Email(required=True)


class ResetPasswordSchema(BaseSchema):
    aliases = {'newPassword': 'password', 'new_password': 'password'}

    token = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH))


class ProfileUpdateSchema(BaseSchema):
    """
    Profile Update Schema

    Every field is optional. Changing the password requires the current one.
    """
    aliases = {
        'avatar': 'avatar_path',
        'currentPassword': 'current_password',
        'newPassword': 'new_password',
    }

    name = fields.Str(validate=validate.Length(min=1, max=255))
    email = fields.Email()
    avatar_path = fields.Str(allow_none=True)
    current_password = fields.Str(load_only=True)
    new_password = fields.Str(load_only=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH))

    @validates_schema
    def validate_password_change(self, data, **kwargs):
        if data.get('new_password') and not data.get('current_password'):
            raise ValidationError("Informe a senha atual para definir uma nova senha.", "current_password")
