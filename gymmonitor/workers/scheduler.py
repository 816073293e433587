import logging
import threading

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import get_settings
from ..core.constants import BILLING_JOB_ID
from ..db.session import SessionLocal
from ..services import billing_service

logger = logging.getLogger(__name__)

_billing_run_lock = threading.Lock()


def run_daily_billing() -> billing_service.BillingRunSummary | None:
    """Bill every due account once. Returns ``None`` if a run is already active."""

    if not _billing_run_lock.acquire(blocking=False):
        logger.warning("Daily billing is already running; skipping this invocation")
        return None
    try:
        with SessionLocal() as db:
            summary = billing_service.charge_due_members(db)
        logger.info(
            "Daily billing finished",
            extra={
                "billing_date": summary.today.isoformat(),
                "billed": len(summary.billed),
                "failed": len(summary.failed),
            },
        )
        if summary.failed:
            logger.error("Billing failed for accounts %s", summary.failed)
        return summary
    finally:
        _billing_run_lock.release()


def get_scheduler() -> AsyncIOScheduler:
    settings = get_settings()
    scheduler = AsyncIOScheduler(timezone=settings.timezone)
    scheduler.add_job(
        run_daily_billing,
        CronTrigger(hour=settings.billing_hour, minute=settings.billing_minute, timezone=settings.timezone),
        id=BILLING_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
