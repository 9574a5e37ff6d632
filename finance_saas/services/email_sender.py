"""
Email Sender Service

Transactional email (password reset) through AWS SES.
"""
import logging
from typing import Optional, Dict, Any

import boto3
from botocore.exceptions import ClientError, BotoCoreError
from flask import current_app

logger = logging.getLogger(__name__)

# SES client (initialized on first use)
_ses_client = None


def get_ses_client():
    """Get or create AWS SES client."""
    global _ses_client

    if _ses_client is not None:
        return _ses_client

    config = current_app.config
    if not config.get('AWS_ACCESS_KEY_ID') or not config.get('AWS_SECRET_ACCESS_KEY'):
        raise ValueError("AWS credentials not configured. Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY in environment.")

    _ses_client = boto3.client(
        'ses',
        aws_access_key_id=config['AWS_ACCESS_KEY_ID'],
        aws_secret_access_key=config['AWS_SECRET_ACCESS_KEY'],
        region_name=config['AWS_REGION']
    )
    logger.info("AWS SES client initialized", extra={"region": config['AWS_REGION']})
    return _ses_client


def is_transient_error(error: Exception) -> bool:
    """Throttling/unavailable errors are worth a retry."""
    if isinstance(error, ClientError):
        error_code = error.response.get('Error', {}).get('Code', '')
        return error_code in ['Throttling', 'ServiceUnavailable', 'TooManyRequests', 'RequestTimeout']
    return isinstance(error, BotoCoreError)


def send_email(
    recipient_email: str,
    subject: str,
    html_body: str,
    sender_email: Optional[str] = None
) -> Dict[str, Any]:
    """
    Send an HTML email via AWS SES.

    Returns:
        Dict with 'message_id' and 'success' keys

    Raises:
        ValueError: Invalid input, SES misconfiguration or a permanent SES rejection
        ClientError / BotoCoreError: Transient failures, so the caller can retry
    """
    if not recipient_email or not recipient_email.strip():
        raise ValueError("Recipient email is required")

    if not subject or not subject.strip():
        raise ValueError("Email subject is required")

    sender = sender_email or current_app.config.get('SES_SENDER_EMAIL')
    if not sender:
        raise ValueError("Sender email not configured")

    ses_client = get_ses_client()
    try:
        response = ses_client.send_email(
            Source=sender,
            Destination={'ToAddresses': [recipient_email.strip()]},
            Message={
                'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                'Body': {'Html': {'Data': html_body, 'Charset': 'UTF-8'}}
            }
        )
    except ClientError as e:
        if is_transient_error(e):
            raise
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))
        logger.error("SES API error", extra={
            "error_code": error_code,
            "error_message": error_message,
            "recipient": recipient_email
        })
        raise ValueError(f"AWS SES error ({error_code}): {error_message}")

    message_id = response.get('MessageId')
    logger.info("Email sent successfully via SES", extra={"message_id": message_id, "recipient": recipient_email})
    return {'success': True, 'message_id': message_id}


def build_password_reset_email(name, reset_url):
    subject = "Recuperação de senha"
    html_body = (
        f"<p>Olá {name},</p>"
        f"<p>Recebemos um pedido para redefinir sua senha. O link expira em 1 hora.</p>"
        f"<p><a href=\"{reset_url}\">Redefinir senha</a></p>"
        f"<p>Se você não fez este pedido, ignore este email.</p>"
    )
    return subject, html_body
