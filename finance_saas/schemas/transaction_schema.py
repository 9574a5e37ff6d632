from decimal import Decimal

from marshmallow import fields, validate

from finance_saas.schemas.base import BaseSchema

TRANSACTION_TYPES = ('income', 'expense')
COST_TYPES = ('fixed', 'variable')
TRANSACTION_STATUSES = ('pending', 'completed')


class TransactionCreateSchema(BaseSchema):
    """
    Transaction Create Schema

    description, amount, type and date are required. The category is
    resolved by name (``category``) within the tenant, or picked by the AI
    adapter when ``use_ai_category`` is set.
    """
    aliases = {'category_name': 'category', 'useAiCategory': 'use_ai_category'}

    description = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    amount = fields.Decimal(required=True, validate=validate.Range(min=Decimal('0.01')))
    type = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
    date = fields.Date(required=True)
    cost_type = fields.Str(load_default='variable', validate=validate.OneOf(COST_TYPES))
    status = fields.Str(load_default='completed', validate=validate.OneOf(TRANSACTION_STATUSES))
    category = fields.Str(allow_none=True, validate=validate.Length(max=100))
    client_id = fields.Int(allow_none=True)
    attachment_path = fields.Str(allow_none=True)
    use_ai_category = fields.Bool(load_default=False)


class TransactionStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_STATUSES))
