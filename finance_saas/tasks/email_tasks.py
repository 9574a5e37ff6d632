"""
Celery tasks for transactional email via AWS SES.
"""
import logging
from typing import Dict, Any

from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

from finance_saas.celery_app import celery_app
from finance_saas.extensions import db
from finance_saas.models.user import User
from finance_saas.services.email_sender import build_password_reset_email, send_email

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    name='send_password_reset_email',
    autoretry_for=(ClientError, BotoCoreError),
    retry_backoff=True,
    retry_kwargs={'max_retries': 3}
)
def send_password_reset_email(self, user_id: int, token: str) -> Dict[str, Any]:
    """
    Email the reset link for ``token`` to the user.

    Transient SES errors are retried; permanent ones are logged and reported.
    """
    user = db.session.get(User, user_id)
    if not user:
        logger.error("User not found for password reset email: user_id=%s", user_id)
        return {"success": False, "error": "User not found"}

    reset_url = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password?token={token}"
    subject, html_body = build_password_reset_email(user.name, reset_url)

    try:
        result = send_email(recipient_email=user.email, subject=subject, html_body=html_body)
    except ValueError as e:
        logger.error("Password reset email failed: user_id=%s error=%s", user_id, e)
        return {"success": False, "error": str(e)}

    logger.info("Password reset email sent: user_id=%s message_id=%s", user_id, result.get('message_id'))
    return result
