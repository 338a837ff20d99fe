"""Background scheduler for the hourly booking reminder job."""
import logging

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from reservations.database import SessionLocal
from reservations.repositories.booking_repository import BookingRepository
from reservations.services.notifier import get_notifier
from reservations.services.reminder_service import send_due_reminders

logger = logging.getLogger(__name__)

scheduler = None


def _on_job_event(event):
    if event.code == EVENT_JOB_MISSED:
        logger.warning("Scheduled job MISSED: job_id=%s scheduled_run_time=%s", event.job_id, event.scheduled_run_time)
    else:
        logger.error("Scheduled job FAILED: job_id=%s error=%s", event.job_id, event.exception)


def run_reminder_job() -> int:
    db = SessionLocal()
    try:
        return send_due_reminders(BookingRepository(db), get_notifier())
    finally:
        db.close()


def init_scheduler() -> BackgroundScheduler:
    """Start the scheduler once; later calls return the running instance."""
    global scheduler
    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_listener(_on_job_event, EVENT_JOB_ERROR | EVENT_JOB_MISSED)
    scheduler.add_job(
        run_reminder_job,
        trigger=CronTrigger(minute=0),
        id="booking_reminders",
        name="Send booking reminders",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started with %d job(s)", len(scheduler.get_jobs()))
    return scheduler


def shutdown_scheduler() -> None:
    global scheduler
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Scheduler stopped")
