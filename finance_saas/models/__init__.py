from finance_saas.models.tenant import Tenant
from finance_saas.models.user import User
from finance_saas.models.plan import Plan
from finance_saas.models.category import Category
from finance_saas.models.client import Client
from finance_saas.models.product import Product
from finance_saas.models.transaction import Transaction
from finance_saas.models.recurring_rule import RecurringRule
from finance_saas.models.service_order import ServiceOrder
from finance_saas.models.notification import Notification
from finance_saas.models.audit_log import AuditLogEntry

__all__ = [
    'Tenant',
    'User',
    'Plan',
    'Category',
    'Client',
    'Product',
    'Transaction',
    'RecurringRule',
    'ServiceOrder',
    'Notification',
    'AuditLogEntry',
]
