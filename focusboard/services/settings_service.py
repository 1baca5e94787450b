"""
Settings service - per-user timezone and the reference day derived from it.
"""
from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session

from focusboard.models import UserSettings
from focusboard.repositories.base import store_operation
from focusboard.repositories.settings_repository import SettingsRepository
from focusboard.schemas import SettingsUpdate
from focusboard.services.date_service import DateService


class SettingsService:
    """Service for user settings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SettingsRepository()

    def get_settings(self, user_id: str) -> UserSettings:
        with store_operation(self.db, "settings read"):
            return self.repo.get(self.db, user_id)

    def update_settings(self, user_id: str, settings_update: SettingsUpdate) -> UserSettings:
        DateService.resolve_timezone(settings_update.timezone)
        settings = self.get_settings(user_id)
        settings.timezone = settings_update.timezone
        with store_operation(self.db, "settings update"):
            return self.repo.update(self.db, settings)

    def get_timezone(self, user_id: str, override: Optional[str] = None) -> str:
        """Timezone for the request: explicit override first, then stored settings"""
        if override:
            DateService.resolve_timezone(override)
            return override
        return self.get_settings(user_id).timezone

    def get_reference_date(
        self, user_id: str, override: Optional[str] = None, now: Optional[datetime] = None
    ) -> date:
        return DateService.get_reference_date(self.get_timezone(user_id, override), now)
