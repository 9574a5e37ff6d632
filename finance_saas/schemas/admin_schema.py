from decimal import Decimal

from marshmallow import fields, validate, validates_schema, ValidationError

from finance_saas.schemas.auth_schema import PASSWORD_MIN_LENGTH, RegisterSchema
from finance_saas.schemas.base import BaseSchema


class AdminTenantCreateSchema(RegisterSchema):
    """Tenant provisioning from the admin console; optionally starts on a Plan."""
    aliases = {**RegisterSchema.aliases, 'planId': 'plan_id'}

    plan_id = fields.Int(allow_none=True)


class TenantPlanUpdateSchema(BaseSchema):
    aliases = {
        'planId': 'plan_id',
        'planTier': 'plan_tier',
        'maxUsers': 'max_users',
        'aiUsageLimit': 'ai_usage_limit',
    }

    plan_id = fields.Int(allow_none=True)
    plan_tier = fields.Str(validate=validate.Length(min=1, max=50))
    max_users = fields.Int(validate=validate.Range(min=1))
    ai_usage_limit = fields.Int(validate=validate.Range(min=0))
    active = fields.Bool()

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not any(data.get(key) is not None for key in ('plan_id', 'plan_tier', 'max_users', 'ai_usage_limit', 'active')):
            raise ValidationError("Nenhuma alteração informada.")


class SuperAdminCreateSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH))


class PlanSchema(BaseSchema):
    aliases = {'maxUsers': 'max_users', 'aiUsageLimit': 'ai_usage_limit'}

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "Nome do plano é obrigatório."
    })
    max_users = fields.Int(load_default=5, validate=validate.Range(min=1))
    ai_usage_limit = fields.Int(load_default=100, validate=validate.Range(min=0))
    price = fields.Decimal(load_default=Decimal('0'), validate=validate.Range(min=0))
    active = fields.Bool(load_default=True)
