from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Float, ForeignKey, UniqueConstraint
)
from datetime import datetime, timezone

from focusboard.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp (all DateTime columns store UTC without tzinfo)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LedgerEntry(Base):
    """Append-only signed point transaction. Never updated or deleted."""
    __tablename__ = "points_ledger"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    points = Column(Integer, nullable=False)  # May be negative (progress rollback)

    # Optional attribution. No FK constraint: entries outlive deleted goals/tasks.
    goal_id = Column(Integer, nullable=True, index=True)
    task_id = Column(Integer, nullable=True, index=True)

    description = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    goal_type = Column(String, default="goal")  # goal or project
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)

    target_value = Column(Integer, nullable=False, default=0)
    current_value = Column(Integer, nullable=False, default=0)  # Cache of ledger sum for this goal
    status = Column(String, default="active")  # active, completed, paused, cancelled

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def progress_percentage(self) -> float:
        if not self.target_value:
            return 0.0
        return round((self.current_value or 0) / self.target_value * 100, 2)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=True)
    points = Column(Integer, default=10)
    status = Column(String, default="pending")  # pending, completed
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    points_per_completion = Column(Integer, default=5)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)


class HabitCompletion(Base):
    """Completion fact read by the achievement engine and streak calculator"""
    __tablename__ = "habit_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "habit_id", "completed_on", name="uq_habit_completion_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    points_awarded = Column(Integer, default=0)
    completed_at = Column(DateTime, default=utcnow, nullable=False)
    completed_on = Column(Date, nullable=False)  # User's calendar day of the completion


class EducationItem(Base):
    __tablename__ = "education_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    points_value = Column(Integer, default=100)
    cost = Column(Float, nullable=True)
    status = Column(String, default="pending")  # pending, in_progress, completed
    priority_level = Column(Integer, default=3)  # 1 (highest) to 5
    target_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class EducationCompletion(Base):
    """Completion fact for an education item; an item completes once"""
    __tablename__ = "education_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "education_item_id", name="uq_education_completion_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    education_item_id = Column(
        Integer, ForeignKey("education_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    points_awarded = Column(Integer, default=0)
    notes = Column(String, nullable=True)
    completed_at = Column(DateTime, default=utcnow, nullable=False)


class Priority(Base):
    __tablename__ = "priorities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority_type = Column(String, nullable=False)  # ai_recommended, manual, fire_auto
    priority_score = Column(Float, default=0.0)  # 0-100
    order_index = Column(Integer, default=0)

    is_completed = Column(Boolean, default=False)
    completed_at = Column(DateTime, nullable=True)

    # Soft delete: restorable until purged (24h after deleted_at)
    is_deleted = Column(Boolean, default=False, index=True)
    deleted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# ===== Trophies =====
# Three families share one shape; each family has its own reference and award tables.

class TrophyMixin:
    id = Column(Integer, primary_key=True, index=True)
    threshold = Column(Integer, nullable=False, unique=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    icon = Column(String, nullable=True)


class DisciplineTrophy(TrophyMixin, Base):
    """Per-habit completion-count trophies"""
    __tablename__ = "discipline_trophies"


class TotalHabitTrophy(TrophyMixin, Base):
    """Trophies for total completions across all habits"""
    __tablename__ = "total_habit_trophies"


class SigninStreakTrophy(TrophyMixin, Base):
    """Trophies for consecutive daily sign-ins"""
    __tablename__ = "signin_streak_trophies"


class UserDisciplineTrophy(Base):
    __tablename__ = "user_discipline_trophies"
    __table_args__ = (
        UniqueConstraint("user_id", "trophy_id", "habit_id", name="uq_user_discipline_trophy"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    trophy_id = Column(Integer, ForeignKey("discipline_trophies.id"), nullable=False)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False)
    count_at_award = Column(Integer, default=0)
    awarded_at = Column(DateTime, default=utcnow)


class UserTotalHabitTrophy(Base):
    __tablename__ = "user_total_habit_trophies"
    __table_args__ = (
        UniqueConstraint("user_id", "trophy_id", name="uq_user_total_habit_trophy"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    trophy_id = Column(Integer, ForeignKey("total_habit_trophies.id"), nullable=False)
    count_at_award = Column(Integer, default=0)
    awarded_at = Column(DateTime, default=utcnow)


class UserSigninStreakTrophy(Base):
    __tablename__ = "user_signin_streak_trophies"
    __table_args__ = (
        UniqueConstraint("user_id", "trophy_id", name="uq_user_signin_streak_trophy"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    trophy_id = Column(Integer, ForeignKey("signin_streak_trophies.id"), nullable=False)
    count_at_award = Column(Integer, default=0)
    awarded_at = Column(DateTime, default=utcnow)


# ===== Sign-in streaks =====

class SigninLog(Base):
    __tablename__ = "signin_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "signin_date", name="uq_signin_log_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    signin_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class SigninStreak(Base):
    __tablename__ = "user_signin_streaks"

    user_id = Column(String, primary_key=True)
    current_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    total_count = Column(Integer, default=0)
    last_event_date = Column(Date, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class UserSettings(Base):
    __tablename__ = "user_settings"

    user_id = Column(String, primary_key=True)
    timezone = Column(String, nullable=False, default="America/New_York")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
