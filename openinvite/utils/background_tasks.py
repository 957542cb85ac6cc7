import schedule
import time
import logging
import threading
from datetime import datetime
from typing import Optional
from ..store import PlanStore, get_store
from ..services.notification_service import NotificationService
from ..services.plan_service import PlanService

logger = logging.getLogger(__name__)


class BackgroundTaskScheduler:
    """Hourly upkeep: plan reminders and topping up recurring series"""

    def __init__(self, store: Optional[PlanStore] = None):
        self.store = store
        self.running = False
        self.jobs = schedule.Scheduler()
        self.last_check_time = None
        self.last_check_status = "Not started"

    def schedule_plan_checks(self):
        """Schedule plan checks to run every hour"""

        self.jobs.clear()
        self.jobs.every().hour.do(self.run_plan_checks)
        logger.info("Plan checks scheduled every hour")

    def run_plan_checks(self) -> dict:
        """Send due reminders and extend open series to the horizon"""
        self.last_check_time = datetime.utcnow()
        store = self.store or get_store()

        try:
            reminders = NotificationService(store).create_plan_reminders()
            extended = PlanService(store).extend_open_series()
        except Exception as e:
            logger.error(f"Background plan check failed: {str(e)}", exc_info=True)
            self.last_check_status = f"Error: {str(e)}"
            return {"reminders": 0, "occurrences_added": 0}

        logger.info(
            f"Background plan check completed: {reminders} reminders, "
            f"{extended} occurrences added"
        )
        self.last_check_status = "Success"
        return {"reminders": reminders, "occurrences_added": extended}

    def start_scheduler(self):
        """Run pending jobs until stopped (blocking)"""

        self.running = True
        logger.info("Starting background task scheduler...")

        self.schedule_plan_checks()

        while self.running:
            try:
                self.jobs.run_pending()
            except Exception as e:
                logger.error(f"Scheduler error: {str(e)}")
            time.sleep(60)

    def stop_scheduler(self):
        self.running = False
        self.jobs.clear()
        logger.info("Background task scheduler stopped")

    def get_status(self) -> dict:
        return {
            "running": self.running,
            "scheduled_jobs_count": len(self.jobs.jobs),
            "last_check_time": (
                self.last_check_time.isoformat() if self.last_check_time else None
            ),
            "last_check_status": self.last_check_status,
        }


scheduler = BackgroundTaskScheduler()


def start_background_tasks(store: Optional[PlanStore] = None):
    """Start background tasks in a daemon thread (call once at startup)"""

    scheduler.store = store

    def run_scheduler():
        try:
            scheduler.start_scheduler()
        except Exception as e:
            logger.error(f"Failed to start scheduler: {str(e)}")

    scheduler_thread = threading.Thread(target=run_scheduler, daemon=True)
    scheduler_thread.start()

    logger.info("Background tasks started in separate thread")


def stop_background_tasks():
    if scheduler.running:
        scheduler.stop_scheduler()
