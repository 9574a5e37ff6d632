from marshmallow import fields, validate

from finance_saas.schemas.auth_schema import PASSWORD_MIN_LENGTH
from finance_saas.schemas.base import BaseSchema

ROLES = ('admin', 'user')


class TenantSettingsSchema(BaseSchema):
    aliases = {'closingDay': 'closing_day'}

    name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Nome e dia de fechamento são obrigatórios."
    })
    closing_day = fields.Int(required=True, validate=validate.Range(min=1, max=31), error_messages={
        "required": "Nome e dia de fechamento são obrigatórios."
    })


class TenantUserCreateSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH))
    role = fields.Str(load_default='user', validate=validate.OneOf(ROLES))
