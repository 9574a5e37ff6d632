"""
Audit trail writer.

Entries are written after the audited change has been committed, in their own
commit. A failure here is logged and swallowed: the audited operation has
already succeeded and must not be reported as failed.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from finance_saas.extensions import db
from finance_saas.models.audit_log import AuditLogEntry

logger = logging.getLogger(__name__)

ACTIONS = ('CREATE', 'UPDATE', 'DELETE')


def log_action(tenant_id, user_id, action, entity, entity_id=None, details=None):
    if action not in ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")
    try:
        entry = AuditLogEntry(
            tenant_id=tenant_id,
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            details=details,
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(
            "Failed to write audit log: tenant_id=%s entity=%s entity_id=%s error=%s",
            tenant_id, entity, entity_id, exc
        )
        return None


def list_recent(tenant_id, limit=100):
    return (
        AuditLogEntry.query
        .filter_by(tenant_id=tenant_id)
        .order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc())
        .limit(limit)
        .all()
    )
