"""
Habit repository - Data access layer for habits and their completion records.
Completion records are facts: inserted by the completion flow, read by the
achievement engine and the streak calculator, never modified.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from focusboard.models import Habit, HabitCompletion


class HabitRepository:
    """Repository for Habit data access"""

    @staticmethod
    def get_by_id(db: Session, habit_id: int, user_id: str) -> Optional[Habit]:
        return db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id).first()

    @staticmethod
    def get_all(db: Session, user_id: str, active_only: bool = True) -> List[Habit]:
        query = db.query(Habit).filter(Habit.user_id == user_id)
        if active_only:
            query = query.filter(Habit.is_active == True)
        return query.order_by(Habit.created_at).all()

    @staticmethod
    def create(db: Session, habit: Habit) -> Habit:
        db.add(habit)
        db.commit()
        db.refresh(habit)
        return habit


class HabitCompletionRepository:
    """Repository for HabitCompletion data access"""

    @staticmethod
    def count_for_habit(db: Session, user_id: str, habit_id: int) -> int:
        """Number of completions of one habit"""
        return db.query(func.count(HabitCompletion.id)).filter(
            HabitCompletion.user_id == user_id,
            HabitCompletion.habit_id == habit_id
        ).scalar() or 0

    @staticmethod
    def count_total(db: Session, user_id: str) -> int:
        """Number of completions across all habits"""
        return db.query(func.count(HabitCompletion.id)).filter(
            HabitCompletion.user_id == user_id
        ).scalar() or 0

    @staticmethod
    def get_user_ids(db: Session) -> List[str]:
        """Every user with at least one completion"""
        rows = db.query(HabitCompletion.user_id).distinct().all()
        return [row[0] for row in rows]

    @staticmethod
    def get_on_day(db: Session, user_id: str, habit_id: int, day: date) -> Optional[HabitCompletion]:
        """Completion of a habit on a calendar day, if any"""
        return db.query(HabitCompletion).filter(
            HabitCompletion.user_id == user_id,
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.completed_on == day
        ).first()

    @staticmethod
    def get_completion_days(db: Session, user_id: str, habit_id: int) -> List[date]:
        """Distinct calendar days on which the habit was completed, ascending"""
        rows = db.query(HabitCompletion.completed_on).filter(
            HabitCompletion.user_id == user_id,
            HabitCompletion.habit_id == habit_id
        ).distinct().order_by(HabitCompletion.completed_on).all()
        return [row[0] for row in rows]

    @staticmethod
    def add(db: Session, completion: HabitCompletion) -> HabitCompletion:
        """Stage a completion in the caller's transaction"""
        db.add(completion)
        db.flush()
        return completion
