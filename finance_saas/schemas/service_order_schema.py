from decimal import Decimal

from marshmallow import fields, validate

from finance_saas.schemas.base import BaseSchema

PRIORITIES = ('normal', 'high')
SERVICE_ORDER_STATUSES = ('open', 'in_progress', 'waiting', 'completed')


class ServiceOrderCreateSchema(BaseSchema):
    aliases = {'clientName': 'client_name'}

    client_name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Cliente e Equipamento são obrigatórios."
    })
    equipment = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Cliente e Equipamento são obrigatórios."
    })
    description = fields.Str(load_default='', allow_none=True)
    priority = fields.Str(load_default='normal', validate=validate.OneOf(PRIORITIES))
    price = fields.Decimal(load_default=Decimal('0'), validate=validate.Range(min=0))


class ServiceOrderStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(SERVICE_ORDER_STATUSES))
