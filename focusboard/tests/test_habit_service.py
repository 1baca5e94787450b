"""
Tests for habit and task completion flows.
"""
import pytest
from datetime import timedelta
from unittest.mock import patch

from focusboard.exceptions import InvalidStateException, NotFoundException
from focusboard.models import HabitCompletion
from focusboard.repositories.habit_repository import HabitCompletionRepository
from focusboard.schemas import HabitCreate, TaskCreate
from focusboard.services.habit_service import HabitService
from focusboard.services.ledger_service import LedgerService
from focusboard.services.task_service import TaskService


class TestCompleteHabit:
    """Tests for complete_habit"""

    def test_records_completion_points_and_trophies(self, seeded_trophies, user_id, today):
        db = seeded_trophies
        service = HabitService(db)
        habit = service.create_habit(user_id, HabitCreate(title="Stretch", points_per_completion=5))

        result = service.complete_habit(user_id, habit.id, today)

        assert result.completion.completed_on == today
        assert result.streak.current == 1
        assert [t.threshold for t in result.habit_awards.awarded] == [1]
        assert result.total_awards.awarded == []
        assert LedgerService(db).get_balance(user_id) == 5

    def test_twice_in_one_day_is_invalid(self, seeded_trophies, user_id, today):
        db = seeded_trophies
        service = HabitService(db)
        habit = service.create_habit(user_id, HabitCreate(title="Stretch"))
        service.complete_habit(user_id, habit.id, today)

        with pytest.raises(InvalidStateException):
            service.complete_habit(user_id, habit.id, today)

        assert db.query(HabitCompletion).count() == 1

    def test_concurrent_completion_same_day_is_invalid(self, seeded_trophies, user_id, today):
        """Should reject a second completion that slipped past the day check"""
        db = seeded_trophies
        service = HabitService(db)
        habit = service.create_habit(user_id, HabitCreate(title="Stretch", points_per_completion=5))
        service.complete_habit(user_id, habit.id, today)

        with patch.object(HabitCompletionRepository, "get_on_day", return_value=None):
            with pytest.raises(InvalidStateException):
                service.complete_habit(user_id, habit.id, today)

        assert db.query(HabitCompletion).count() == 1
        assert LedgerService(db).get_balance(user_id) == 5

    def test_streak_over_consecutive_days(self, seeded_trophies, user_id, today):
        db = seeded_trophies
        service = HabitService(db)
        habit = service.create_habit(user_id, HabitCreate(title="Stretch"))

        for offset in (2, 1, 0):
            day = today - timedelta(days=offset)
            db.add(HabitCompletion(user_id=user_id, habit_id=habit.id, completed_on=day))
        db.commit()

        assert service.get_streak(user_id, habit.id, today).current == 3
        assert service.get_streak(user_id, habit.id, today + timedelta(days=2)).current == 0

    def test_other_users_habit_not_found(self, seeded_trophies, user_id, other_user_id, today):
        service = HabitService(seeded_trophies)
        habit = service.create_habit(other_user_id, HabitCreate(title="Theirs"))

        with pytest.raises(NotFoundException):
            service.complete_habit(user_id, habit.id, today)


class TestCompleteTask:
    """Tests for complete_task"""

    def test_awards_task_points(self, db_session, user_id):
        service = TaskService(db_session)
        task = service.create_task(user_id, TaskCreate(title="Email", points=12))

        completed = service.complete_task(user_id, task.id)

        assert completed.status == "completed"
        assert LedgerService(db_session).get_balance(user_id, task_id=task.id) == 12
        assert LedgerService(db_session).get_history(user_id)[0].type == "task_completion"

    def test_complete_twice_is_invalid(self, db_session, user_id):
        service = TaskService(db_session)
        task = service.create_task(user_id, TaskCreate(title="Email"))
        service.complete_task(user_id, task.id)

        with pytest.raises(InvalidStateException):
            service.complete_task(user_id, task.id)
