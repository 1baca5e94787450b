"""
Date calculation service.
Resolves the user's reference calendar day and converts calendar days into
UTC ranges for querying timestamp columns.
"""
from datetime import datetime, timedelta, date, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from focusboard.constants import DEFAULT_TIMEZONE
from focusboard.exceptions import ValidationException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def resolve_timezone(tz_name: Optional[str]) -> ZoneInfo:
        """
        Resolve an IANA timezone name.

        Args:
            tz_name: Timezone name such as "Europe/Berlin" (None = default)

        Returns:
            ZoneInfo for the name

        Raises:
            ValidationException: If the name is unknown
        """
        try:
            return ZoneInfo(tz_name or DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationException("timezone", f"Unknown timezone '{tz_name}'")

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def get_reference_date(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
        """
        Get the user's current calendar day.

        Example: at 02:00 UTC a user in America/New_York is still on the
        previous calendar day.

        Args:
            tz_name: User's timezone
            now: Aware "current" instant (defaults to the real clock)

        Returns:
            Calendar date in the user's timezone
        """
        tz = DateService.resolve_timezone(tz_name)
        now = now or DateService.utc_now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(tz).date()

    @staticmethod
    def get_day_range(target_date: date, tz_name: Optional[str] = None) -> Tuple[datetime, datetime]:
        """
        Get the UTC bounds of a calendar day in the user's timezone.

        Returns:
            (day_start, day_end) as naive UTC datetimes, end exclusive
        """
        tz = DateService.resolve_timezone(tz_name)
        local_start = datetime.combine(target_date, datetime.min.time()).replace(tzinfo=tz)
        local_end = datetime.combine(target_date + timedelta(days=1), datetime.min.time()).replace(tzinfo=tz)
        return (
            local_start.astimezone(timezone.utc).replace(tzinfo=None),
            local_end.astimezone(timezone.utc).replace(tzinfo=None),
        )

    @staticmethod
    def to_local_date(utc_dt: datetime, tz_name: Optional[str] = None) -> date:
        """Convert a naive UTC timestamp to the user's calendar day"""
        tz = DateService.resolve_timezone(tz_name)
        return utc_dt.replace(tzinfo=timezone.utc).astimezone(tz).date()
