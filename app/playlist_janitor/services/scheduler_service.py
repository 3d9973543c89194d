"""
Skipped track cleanup scheduler.

Runs the cleanup for all playlists on a cron schedule (CLEANUP_SCHEDULE).
"""

import logging
from typing import Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.jobstores.base import JobLookupError
from sqlalchemy.orm import Session

from playlist_janitor.db.session import SessionLocal
from playlist_janitor.schemas.tracks import CleanupResult
from playlist_janitor.services.cleanup_service import cleanup_all
from playlist_janitor.services.database_service import SqlDatabaseService
from playlist_janitor.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "skipped_track_cleanup"


def _spotify_or_none() -> Optional[SpotifyClient]:
    try:
        return SpotifyClient()
    except RuntimeError as e:
        logger.warning(f"Spotify not configured, cleanup only archives skips: {e}")
        return None


class CleanupScheduler:
    """
    Runs the skipped track cleanup periodically.

    Uses APScheduler with a cron trigger; the job opens its own session.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        spotify_factory: Callable[[], Optional[SpotifyClient]] = _spotify_or_none,
    ):
        self.scheduler = AsyncIOScheduler()
        self.session_factory = session_factory
        self.spotify_factory = spotify_factory

    def start(self):
        """Start the scheduler."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Cleanup scheduler started")

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Cleanup scheduler stopped")

    def schedule(self, cron_expression: str):
        """
        Add or replace the cleanup job.

        Args:
            cron_expression: Cron expression (e.g., "0 3 * * *" for every day at 3:00 AM)
        """
        try:
            trigger = CronTrigger.from_crontab(cron_expression)
        except ValueError as e:
            logger.error(f"Failed to schedule cleanup: {e}")
            raise ValueError(f"Invalid cron expression: {cron_expression}")

        # Remove existing job if present
        self._remove_job()

        self.scheduler.add_job(
            func=self.run_cleanup,
            trigger=trigger,
            id=CLEANUP_JOB_ID,
            name="Skipped track cleanup",
            replace_existing=True,
        )
        logger.info(f"Scheduled skipped track cleanup: {cron_expression}")

    def _remove_job(self) -> bool:
        try:
            self.scheduler.remove_job(CLEANUP_JOB_ID)
            return True
        except JobLookupError:
            return False

    def unschedule(self):
        if self._remove_job():
            logger.info("Removed scheduled cleanup")
        else:
            logger.warning("No scheduled cleanup to remove")

    def run_cleanup(self) -> List[CleanupResult]:
        """Clean up every playlist. Called by APScheduler, also usable by hand."""
        logger.info("=== Running skipped track cleanup ===")

        db = self.session_factory()
        try:
            results = cleanup_all(SqlDatabaseService(db), self.spotify_factory())
            archived = sum(r.archived_count for r in results)
            logger.info(f"Cleanup finished: {len(results)} playlists checked, {archived} skips archived")
            return results
        except Exception as e:
            logger.error(f"Cleanup run failed: {e}", exc_info=True)
            db.rollback()
            raise
        finally:
            db.close()

    def get_scheduled_jobs(self) -> list:
        """
        Get list of all scheduled jobs.

        Returns:
            List of dicts with job information
        """
        jobs = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": next_run.isoformat() if next_run else None,
                "trigger": str(job.trigger),
            })
        return jobs


# Global scheduler instance
_scheduler: Optional[CleanupScheduler] = None


def get_scheduler() -> CleanupScheduler:
    """Get the global scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = CleanupScheduler()
    return _scheduler


def start_scheduler(cron_expression: str):
    """Start the global scheduler with the cleanup job."""
    scheduler = get_scheduler()
    scheduler.schedule(cron_expression)
    scheduler.start()


def shutdown_scheduler():
    """Shutdown the global scheduler."""
    scheduler = get_scheduler()
    scheduler.shutdown()
