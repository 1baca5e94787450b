"""
Habit and task HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from focusboard.auth import get_current_user_id, get_timezone_override
from focusboard.database import get_db
from focusboard.schemas import (
    HabitCompletionResult, HabitCreate, HabitResponse, StreakResponse, TaskCreate, TaskResponse
)
from focusboard.services.habit_service import HabitService
from focusboard.services.settings_service import SettingsService
from focusboard.services.streak_service import to_response
from focusboard.services.task_service import TaskService

router = APIRouter(prefix="/api/habits", tags=["habits"])
tasks_router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[HabitResponse])
def get_habits(
    active_only: bool = Query(True),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return HabitService(db).get_habits(user_id, active_only)


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(
    habit: HabitCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return HabitService(db).create_habit(user_id, habit)


@router.post("/{habit_id}/complete", response_model=HabitCompletionResult)
def complete_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    """Complete a habit for today; awards points and checks trophies."""
    today = SettingsService(db).get_reference_date(user_id, tz_override)
    return HabitService(db).complete_habit(user_id, habit_id, today)


@router.get("/{habit_id}/streak", response_model=StreakResponse)
def get_habit_streak(
    habit_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    today = SettingsService(db).get_reference_date(user_id, tz_override)
    return to_response(HabitService(db).get_streak(user_id, habit_id, today))


@tasks_router.get("", response_model=List[TaskResponse])
def get_tasks(
    status_filter: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return TaskService(db).get_tasks(user_id, status_filter)


@tasks_router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return TaskService(db).create_task(user_id, task)


@tasks_router.post("/{task_id}/complete", response_model=TaskResponse)
def complete_task(task_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return TaskService(db).complete_task(user_id, task_id)
