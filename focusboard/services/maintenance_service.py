"""
Maintenance service - sweeps run by the scheduler and the cron endpoint.
Every sweep is idempotent and safe to run while users are active.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from focusboard.exceptions import FocusboardException
from focusboard.repositories.habit_repository import HabitCompletionRepository
from focusboard.repositories.streak_repository import SigninRepository
from focusboard.schemas import CleanupSweepResult, MaintenanceResult
from focusboard.services.achievement_service import AchievementService
from focusboard.services.priority_service import PriorityService
from focusboard.services.settings_service import SettingsService

logger = logging.getLogger("focusboard.maintenance")


class MaintenanceService:
    """Service for scheduled maintenance"""

    def __init__(self, db: Session):
        self.db = db
        self.priorities = PriorityService(db)
        self.achievements = AchievementService(db)
        self.settings = SettingsService(db)

    def run_priority_cleanup(self, now: Optional[datetime] = None) -> CleanupSweepResult:
        """Purge priorities soft-deleted more than 24 hours before `now` (naive UTC)"""
        result = self.priorities.run_scheduled_cleanup(now)
        logger.info(
            f"Priority cleanup: {result.purged_count} purged across "
            f"{result.users_scanned} users ({result.failed_count} failed)"
        )
        return result

    def run_trophy_sweep(self, now: Optional[datetime] = None) -> tuple:
        """
        Re-run total-habit and sign-in trophy checks for every user with activity.

        Returns:
            (users checked, trophies awarded)
        """
        user_ids = set(HabitCompletionRepository.get_user_ids(self.db))
        user_ids.update(s.user_id for s in SigninRepository.get_all_streaks(self.db))

        awarded = 0
        for user_id in sorted(user_ids):
            try:
                today = self.settings.get_reference_date(user_id, now=now)
                awarded += len(self.achievements.check_total_habit_achievements(user_id).awarded)
                awarded += len(
                    self.achievements.check_signin_streak_achievements(user_id, today).awarded
                )
            except FocusboardException as e:
                logger.error(f"Trophy sweep failed for user {user_id}: {e.message}")

        return len(user_ids), awarded

    def run_nightly(self, now: Optional[datetime] = None) -> MaintenanceResult:
        """Cleanup followed by the trophy sweep"""
        ran_at = now or datetime.now(timezone.utc).replace(tzinfo=None)
        logger.info(f"Nightly maintenance started at {ran_at}")

        cleanup = self.run_priority_cleanup(ran_at)
        users_checked, awarded = self.run_trophy_sweep(ran_at)

        logger.info(
            f"Nightly maintenance finished: {users_checked} users checked, {awarded} trophies awarded"
        )
        return MaintenanceResult(
            cleanup=cleanup,
            trophy_users_checked=users_checked,
            trophies_awarded=awarded,
            ran_at=ran_at,
        )
