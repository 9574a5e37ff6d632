"""
Celery tasks package.

Import directly from modules when needed:
  from finance_saas.tasks.recurring_tasks import process_all_recurring
  from finance_saas.tasks.email_tasks import send_password_reset_email
"""
