from decimal import Decimal

from marshmallow import fields, validate

from finance_saas.schemas.base import BaseSchema
from finance_saas.schemas.transaction_schema import TRANSACTION_TYPES

CLIENT_TYPES = ('client', 'supplier', 'both')


class ClientSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Nome é obrigatório"
    })
    email = fields.Email(allow_none=True)
    phone = fields.Str(allow_none=True, validate=validate.Length(max=50))
    document = fields.Str(allow_none=True, validate=validate.Length(max=50))
    address = fields.Str(allow_none=True)
    type = fields.Str(load_default='client', validate=validate.OneOf(CLIENT_TYPES))


class ProductSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Nome do produto é obrigatório"
    })
    description = fields.Str(allow_none=True)
    sale_price = fields.Decimal(load_default=Decimal('0'), validate=validate.Range(min=0))
    cost_price = fields.Decimal(load_default=Decimal('0'), validate=validate.Range(min=0))
    stock = fields.Int(load_default=0)
    min_stock = fields.Int(load_default=5, validate=validate.Range(min=0))


class CategorySchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    type = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
