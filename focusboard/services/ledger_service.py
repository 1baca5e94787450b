"""
Ledger service - Append-only points ledger and its aggregates.
The ledger is the source of truth for points; every balance is a sum of entries.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.constants import (
    ENTRY_TYPE_GOAL_PROGRESS,
    ENTRY_TYPE_TASK_COMPLETION,
    ENTRY_TYPE_OTHER,
    LEDGER_BREAKDOWN_DAYS,
    LEDGER_HISTORY_DEFAULT_LIMIT,
)
from focusboard.exceptions import NotFoundException, ValidationException
from focusboard.models import Goal, LedgerEntry, Task
from focusboard.repositories.base import store_operation
from focusboard.repositories.ledger_repository import LedgerRepository
from focusboard.repositories.task_repository import TaskRepository
from focusboard.schemas import (
    DailyPoints, LedgerAwardCreate, LedgerHistoryItem, LedgerSummaryResponse
)
from focusboard.services.date_service import DateService

logger = logging.getLogger("focusboard.ledger")


class LedgerService:
    """Service for appending to and aggregating the points ledger."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LedgerRepository()
        self.task_repo = TaskRepository()
        self.date_service = DateService()

    def append(
        self,
        user_id: str,
        points: int,
        description: str,
        goal_id: Optional[int] = None,
        task_id: Optional[int] = None,
        commit: bool = True
    ) -> LedgerEntry:
        """
        Append a signed point entry.

        The sign is not interpreted: negative points record a rollback.

        Args:
            user_id: Owner of the entry
            points: Signed integer points
            description: Human-readable reason
            goal_id: Optional goal attribution
            task_id: Optional task attribution
            commit: False to stage the entry in the caller's transaction

        Returns:
            The appended entry
        """
        entry = LedgerEntry(
            user_id=user_id,
            points=int(points),
            description=description,
            goal_id=goal_id,
            task_id=task_id,
        )
        with store_operation(self.db, "ledger append"):
            self.repo.append(self.db, entry, commit=commit)
        logger.info(
            f"Ledger append user={user_id} points={points:+d} goal={goal_id} task={task_id}"
        )
        return entry

    def get_balance(
        self,
        user_id: str,
        goal_id: Optional[int] = None,
        task_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> int:
        """Sum of points in a scope and optional [start, end) window"""
        return self.repo.sum_points(self.db, user_id, goal_id, task_id, start, end)

    def award_manual(self, user_id: str, award: LedgerAwardCreate) -> LedgerEntry:
        """
        Record a manual, non-negative award attributed to a task.

        Goal attribution is refused here: a goal's value is a cache of its
        ledger entries and only the progress reconciler may move it.
        """
        if award.goal_id is not None:
            raise ValidationException(
                "goal_id", "Goal progress is recorded through the progress endpoint"
            )
        if award.task_id is None:
            raise ValidationException("task_id", "task_id must be provided")
        if not self.task_repo.get_by_id(self.db, award.task_id, user_id):
            raise NotFoundException("Task", award.task_id)

        return self.append(
            user_id, award.points, award.description, task_id=award.task_id
        )

    def get_summary(
        self, user_id: str, tz_name: Optional[str], now: Optional[datetime] = None
    ) -> LedgerSummaryResponse:
        """
        Daily/weekly totals with a day-bucketed breakdown.

        Daily points cover the last 24 hours, weekly points the last 7 days.
        The breakdown buckets the last 7 calendar days in the user's timezone.
        """
        now = now or self.date_service.utc_now()
        now_naive = now.astimezone(timezone.utc).replace(tzinfo=None) if now.tzinfo else now
        today = self.date_service.get_reference_date(tz_name, now)

        daily_points = self.get_balance(user_id, start=now_naive - timedelta(days=1))
        weekly_points = self.get_balance(user_id, start=now_naive - timedelta(days=7))

        week_start = today - timedelta(days=LEDGER_BREAKDOWN_DAYS - 1)
        range_start, _ = self.date_service.get_day_range(week_start, tz_name)
        _, range_end = self.date_service.get_day_range(today, tz_name)
        entries = self.repo.get_entries(self.db, user_id, start=range_start, end=range_end)

        buckets = {week_start + timedelta(days=i): 0 for i in range(LEDGER_BREAKDOWN_DAYS)}
        for entry in entries:
            day = self.date_service.to_local_date(entry.created_at, tz_name)
            if day in buckets:
                buckets[day] += entry.points

        breakdown = [
            DailyPoints(date=day, points=points, day_name=day.strftime("%a"))
            for day, points in sorted(buckets.items())
        ]

        return LedgerSummaryResponse(
            daily_points=daily_points,
            weekly_points=weekly_points,
            total_points=self.get_balance(user_id),
            today=today,
            week_start=week_start,
            week_end=today,
            daily_breakdown=breakdown,
        )

    def get_history(
        self, user_id: str, limit: int = LEDGER_HISTORY_DEFAULT_LIMIT
    ) -> List[LedgerHistoryItem]:
        """Chronological history (newest first) typed by attribution"""
        entries = self.repo.get_entries(self.db, user_id, limit=limit)

        goal_ids = {e.goal_id for e in entries if e.goal_id is not None}
        task_ids = {e.task_id for e in entries if e.task_id is not None}
        goals = {}
        tasks = {}
        if goal_ids:
            goals = {
                g.id: g for g in self.db.query(Goal).filter(
                    Goal.id.in_(goal_ids), Goal.user_id == user_id
                ).all()
            }
        if task_ids:
            tasks = {
                t.id: t for t in self.db.query(Task).filter(
                    Task.id.in_(task_ids), Task.user_id == user_id
                ).all()
            }

        history = []
        for entry in entries:
            goal = goals.get(entry.goal_id)
            task = tasks.get(entry.task_id)
            if goal is not None:
                entry_type = ENTRY_TYPE_GOAL_PROGRESS
            elif task is not None:
                entry_type = ENTRY_TYPE_TASK_COMPLETION
            else:
                entry_type = ENTRY_TYPE_OTHER

            history.append(LedgerHistoryItem(
                id=entry.id,
                type=entry_type,
                points=entry.points,
                description=entry.description,
                created_at=entry.created_at,
                goal_id=entry.goal_id,
                goal_title=goal.title if goal else None,
                task_id=entry.task_id,
                task_title=task.title if task else None,
            ))
        return history
