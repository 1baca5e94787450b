"""
Background scheduler for maintenance jobs
Handles:
- Hourly purge of priorities soft-deleted more than 24 hours ago
- Nightly maintenance (purge + trophy sweep)
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from focusboard.constants import NIGHTLY_MAINTENANCE_HOUR
from focusboard.database import SessionLocal
from focusboard.services.maintenance_service import MaintenanceService

logger = logging.getLogger("focusboard.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


async def run_priority_cleanup():
    """Job: purge expired soft-deleted priorities"""
    db = SessionLocal()
    try:
        MaintenanceService(db).run_priority_cleanup()
    except Exception as e:
        logger.error(f"Scheduler Error (Priority Cleanup): {e}")
    finally:
        db.close()


async def run_nightly_maintenance():
    """Job: nightly cleanup and trophy sweep"""
    db = SessionLocal()
    try:
        MaintenanceService(db).run_nightly()
    except Exception as e:
        logger.error(f"Scheduler Error (Nightly Maintenance): {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if not scheduler.running:
        scheduler.add_job(
            run_priority_cleanup,
            CronTrigger(minute=0),
            id='priority_cleanup',
            replace_existing=True
        )

        scheduler.add_job(
            run_nightly_maintenance,
            CronTrigger(hour=NIGHTLY_MAINTENANCE_HOUR, minute=0),
            id='nightly_maintenance',
            replace_existing=True
        )

        scheduler.start()
        logger.info(">>> APScheduler STARTED <<<")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("APScheduler stopped")
