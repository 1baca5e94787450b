"""
Habit service.
Completing a habit writes a completion fact and its ledger entry together,
then runs the per-habit and total-completion trophy checks.
"""
import logging
from datetime import date
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from focusboard.exceptions import InvalidStateException, NotFoundException
from focusboard.models import Habit, HabitCompletion
from focusboard.repositories.base import store_operation
from focusboard.repositories.habit_repository import HabitCompletionRepository, HabitRepository
from focusboard.schemas import HabitCompletionResponse, HabitCompletionResult, HabitCreate
from focusboard.services.achievement_service import AchievementService
from focusboard.services.ledger_service import LedgerService
from focusboard.services.streak_service import StreakState, streak_from_days, to_response

logger = logging.getLogger("focusboard.habits")


class HabitService:
    """Service for habits and their completions"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.completion_repo = HabitCompletionRepository()
        self.ledger = LedgerService(db)
        self.achievements = AchievementService(db)

    def get_habits(self, user_id: str, active_only: bool = True) -> List[Habit]:
        return self.habit_repo.get_all(self.db, user_id, active_only)

    def get_habit(self, user_id: str, habit_id: int) -> Habit:
        habit = self.habit_repo.get_by_id(self.db, habit_id, user_id)
        if not habit:
            raise NotFoundException("Habit", habit_id)
        return habit

    def create_habit(self, user_id: str, habit_data: HabitCreate) -> Habit:
        habit = Habit(user_id=user_id, **habit_data.model_dump())
        with store_operation(self.db, "habit create"):
            return self.habit_repo.create(self.db, habit)

    def complete_habit(self, user_id: str, habit_id: int, today: date) -> HabitCompletionResult:
        """
        Record today's completion of a habit.

        Args:
            user_id: Owner of the habit
            habit_id: Habit ID
            today: User's reference calendar day

        Raises:
            NotFoundException: habit absent or not owned
            InvalidStateException: habit inactive or already completed today
        """
        habit = self.get_habit(user_id, habit_id)
        if not habit.is_active:
            raise InvalidStateException("Habit", habit_id, "habit is not active")

        if self.completion_repo.get_on_day(self.db, user_id, habit_id, today):
            raise InvalidStateException("Habit", habit_id, "habit already completed today")

        points = habit.points_per_completion or 0
        completion = HabitCompletion(
            user_id=user_id,
            habit_id=habit_id,
            points_awarded=points,
            completed_on=today,
        )
        with store_operation(self.db, "habit complete"):
            try:
                self.completion_repo.add(self.db, completion)
            except IntegrityError:
                # A concurrent request recorded today's completion first
                self.db.rollback()
                raise InvalidStateException("Habit", habit_id, "habit already completed today")
            if points:
                self.ledger.append(user_id, points, f'Completed habit "{habit.title}"', commit=False)
            self.db.commit()
            self.db.refresh(completion)

        logger.info(f"Habit {habit_id} completed by user {user_id} on {today} (+{points})")

        habit_awards = self.achievements.check_habit_achievements(user_id, habit_id)
        total_awards = self.achievements.check_total_habit_achievements(user_id)

        new_trophies = len(habit_awards.awarded) + len(total_awards.awarded)
        message = f"Habit completed! +{points} points"
        if new_trophies:
            message += f" and {new_trophies} new trophies"

        return HabitCompletionResult(
            completion=HabitCompletionResponse.model_validate(completion),
            streak=to_response(self.get_streak(user_id, habit_id, today)),
            habit_awards=habit_awards,
            total_awards=total_awards,
            message=message,
        )

    def get_streak(self, user_id: str, habit_id: int, today: date) -> StreakState:
        """Consecutive-day streak derived from the habit's completion days"""
        self.get_habit(user_id, habit_id)
        days = self.completion_repo.get_completion_days(self.db, user_id, habit_id)
        return streak_from_days(days, today)
