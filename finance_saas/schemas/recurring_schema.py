from decimal import Decimal

from marshmallow import fields, validate

from finance_saas.schemas.base import BaseSchema
from finance_saas.schemas.transaction_schema import TRANSACTION_TYPES
from finance_saas.services.recurring import FREQUENCIES


class RecurringRuleSchema(BaseSchema):
    aliases = {'startDate': 'start_date', 'category_name': 'category'}

    description = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    amount = fields.Decimal(required=True, validate=validate.Range(min=Decimal('0.01')))
    type = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
    frequency = fields.Str(load_default='monthly', validate=validate.OneOf(FREQUENCIES))
    start_date = fields.Date(required=True)
    category_id = fields.Int(allow_none=True)
    category = fields.Str(allow_none=True, validate=validate.Length(max=100))


class RecurringToggleSchema(BaseSchema):
    # Absent means "flip the current value"
    active = fields.Bool()
