"""
Goal and project HTTP routes.
Projects live in the goals table and share the progress reconciler.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from focusboard.auth import get_current_user_id
from focusboard.constants import GOAL_TYPE_GOAL, GOAL_TYPE_PROJECT
from focusboard.database import get_db
from focusboard.schemas import (
    GoalCreate, GoalResponse, GoalUpdate, ProgressResult, ProgressUpdate
)
from focusboard.services.goal_service import GoalService

router = APIRouter(prefix="/api/goals", tags=["goals"])
projects_router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=List[GoalResponse])
def get_goals(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return GoalService(db).get_goals(user_id, GOAL_TYPE_GOAL)


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal: GoalCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return GoalService(db).create_goal(user_id, goal)


@router.get("/{goal_id}", response_model=GoalResponse)
def get_goal(goal_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return GoalService(db).get_goal(user_id, goal_id, GOAL_TYPE_GOAL)


@router.patch("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: int,
    goal_update: GoalUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return GoalService(db).update_goal(user_id, goal_id, goal_update, GOAL_TYPE_GOAL)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Delete a goal; its ledger entries are kept."""
    GoalService(db).delete_goal(user_id, goal_id, GOAL_TYPE_GOAL)


@router.put("/{goal_id}/progress", response_model=ProgressResult)
def set_goal_progress(
    goal_id: int,
    progress: ProgressUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Set progress as a percentage; the change in value is written to the ledger."""
    return GoalService(db).set_progress(
        user_id, goal_id, progress.progress_percentage, GOAL_TYPE_GOAL
    )


@router.post("/{goal_id}/rebuild", response_model=GoalResponse)
def rebuild_goal_value(goal_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Recompute current_value from the ledger."""
    return GoalService(db).rebuild_goal_value(user_id, goal_id)


@projects_router.get("", response_model=List[GoalResponse])
def get_projects(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return GoalService(db).get_goals(user_id, GOAL_TYPE_PROJECT)


@projects_router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project: GoalCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    project.goal_type = GOAL_TYPE_PROJECT
    return GoalService(db).create_goal(user_id, project)


@projects_router.put("/{project_id}/progress", response_model=ProgressResult)
def set_project_progress(
    project_id: int,
    progress: ProgressUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return GoalService(db).set_progress(
        user_id, project_id, progress.progress_percentage, GOAL_TYPE_PROJECT
    )


@projects_router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    GoalService(db).delete_goal(user_id, project_id, GOAL_TYPE_PROJECT)
