"""
Scheduled recurring-rule sweep.
"""
import logging
from typing import Dict, Any

from finance_saas.celery_app import celery_app
from finance_saas.services.recurring import process_all_tenants

logger = logging.getLogger(__name__)


@celery_app.task(name='process_all_recurring')
def process_all_recurring() -> Dict[str, Any]:
    """
    Materialise due recurring rules for every active tenant.

    Returns:
        Dict with per-tenant counts and the overall total
    """
    results = process_all_tenants()
    total = sum(results.values())
    logger.info("Daily recurring sweep finished: tenants=%d processed=%d", len(results), total)
    return {"tenants": {str(k): v for k, v in results.items()}, "processed": total}
