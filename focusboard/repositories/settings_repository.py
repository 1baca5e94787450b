"""
Settings repository - Data access layer for per-user settings.
"""
from sqlalchemy.orm import Session

from focusboard.constants import DEFAULT_TIMEZONE
from focusboard.models import UserSettings


class SettingsRepository:
    """Repository for UserSettings data access"""

    @staticmethod
    def get(db: Session, user_id: str) -> UserSettings:
        """
        Get settings for a user (creates with defaults if not exists).

        Returns:
            UserSettings object
        """
        settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
        if not settings:
            settings = UserSettings(user_id=user_id, timezone=DEFAULT_TIMEZONE)
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: UserSettings) -> UserSettings:
        db.commit()
        db.refresh(settings)
        return settings
