"""
Celery entry point for running worker commands.

Usage:
    celery -A celery_worker worker --loglevel=info
    celery -A celery_worker beat --loglevel=info
"""
import logging

from finance_saas import create_app
from finance_saas.celery_app import celery_app

# Tasks run inside this app's context (see init_celery)
app = create_app()

# Import tasks so they're registered with Celery
from finance_saas.tasks import recurring_tasks  # noqa: F401,E402
from finance_saas.tasks import email_tasks  # noqa: F401,E402

logger = logging.getLogger(__name__)
logger.info("Registered tasks: %s", sorted(name for name in celery_app.tasks if not name.startswith('celery.')))

# This makes the celery_app available for command line
if __name__ == '__main__':
    celery_app.start()
