import os
import schedule
import time
import logging
import threading
from datetime import datetime
from ..database import SessionLocal
from ..services.notification_service import NotificationService
from ..services.reminder_repository import SQLAlchemyReminderRepository
from ..services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


def background_scheduler_enabled() -> bool:
    return os.getenv("ENABLE_BACKGROUND_SCHEDULER", "").lower() in ("1", "true", "yes")


class BackgroundTaskScheduler:
    """
    In-process alternative to the external cron trigger.

    Only started when ENABLE_BACKGROUND_SCHEDULER is set; production deployments
    normally call /api/reminders/process from an outside scheduler instead.
    """

    def __init__(self):
        self.running = False
        self.last_check_time = None
        self.last_check_status = "Not started"

    def schedule_checks(self):
        """Schedule reminder and queued-email checks to run every hour"""

        schedule.every().hour.do(self._run_checks)
        logger.info("📅 Reminder and notification checks scheduled every hour")

    def _run_checks(self):
        """Run reminders, then queued notifications"""
        self.last_check_time = datetime.utcnow()

        db = SessionLocal()
        try:
            ReminderService(SQLAlchemyReminderRepository(db)).process_reminders()
            notification_service = NotificationService(db)
            notification_service.process_pending_emails()
            notification_service.schedule_birthday_reminders()
            logger.info("✅ Background check completed successfully")
            self.last_check_status = "Success"
        except Exception as e:
            logger.error(f"❌ Background check failed: {str(e)}", exc_info=True)
            self.last_check_status = f"Error: {str(e)}"
        finally:
            db.close()

    def start_scheduler(self):
        """Start the background task scheduler"""

        self.running = True
        logger.info("🚀 Starting background task scheduler...")

        self.schedule_checks()

        while self.running:
            try:
                schedule.run_pending()
            except Exception as e:
                logger.error(f"Scheduler error: {str(e)}")
            time.sleep(60)

    def stop_scheduler(self):
        """Stop the background task scheduler"""

        self.running = False
        schedule.clear()
        logger.info("⏹️ Background task scheduler stopped")

    def run_immediate_check(self):
        """Run checks immediately"""

        logger.info("🔔 Running immediate check...")
        self._run_checks()

    def get_status(self):
        """Get current scheduler status"""
        return {
            "running": self.running,
            "scheduled_jobs_count": len(schedule.jobs),
            "last_check_time": (
                self.last_check_time.isoformat() if self.last_check_time else None
            ),
            "last_check_status": self.last_check_status,
            "job_details": [
                {
                    "job": str(job.job_func.__name__),
                    "next_run": job.next_run.isoformat() if job.next_run else None,
                    "interval": str(job.interval),
                    "unit": job.unit,
                }
                for job in schedule.jobs
            ],
        }


scheduler = BackgroundTaskScheduler()


def start_background_tasks():
    """Start background tasks when enabled (call this when starting the app)"""

    if not background_scheduler_enabled():
        logger.info("Background scheduler disabled; waiting for external triggers")
        return

    def run_scheduler():
        try:
            scheduler.start_scheduler()
        except Exception as e:
            logger.error(f"Failed to start scheduler: {str(e)}")

    scheduler_thread = threading.Thread(target=run_scheduler, daemon=True)
    scheduler_thread.start()

    logger.info("✅ Background tasks started in separate thread")


def stop_background_tasks():
    """Stop background tasks"""
    if scheduler.running:
        scheduler.stop_scheduler()
