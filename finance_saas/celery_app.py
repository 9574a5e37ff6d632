from celery import Celery
from celery.schedules import crontab
from flask import has_app_context


celery_app = Celery('finance_saas', include=[
    'finance_saas.tasks.recurring_tasks',
    'finance_saas.tasks.email_tasks',
])


def init_celery(app):
    """
    Bind Celery to the current Flask app context so tasks can use database/session.
    """
    broker_url = app.config.get('CELERY_BROKER_URL')
    result_backend = app.config.get('CELERY_RESULT_BACKEND')

    celery_app.conf.update(
        broker_url=broker_url,
        result_backend=result_backend,
        task_serializer='json',
        result_serializer='json',
        accept_content=['json'],
        timezone='UTC',
        enable_utc=True,
        task_always_eager=app.config.get('CELERY_TASK_ALWAYS_EAGER', False),
        task_eager_propagates=True,
        broker_connection_retry_on_startup=True,
        beat_schedule={
            'process-recurring-daily': {
                'task': 'process_all_recurring',
                'schedule': crontab(hour=app.config.get('RECURRING_SWEEP_HOUR', 6), minute=0),
            },
        },
    )

    class ContextTask(celery_app.Task):
        def __call__(self, *args, **kwargs):
            # Eager calls from a request already run inside an app context
            if has_app_context():
                return super().__call__(*args, **kwargs)
            with app.app_context():
                return super().__call__(*args, **kwargs)

    celery_app.Task = ContextTask
    return celery_app
