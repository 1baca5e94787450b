from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import List, Optional


# Ledger schemas
class LedgerEntryResponse(BaseModel):
    id: int
    points: int
    description: str
    goal_id: Optional[int] = None
    task_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LedgerAwardCreate(BaseModel):
    task_id: Optional[int] = None
    goal_id: Optional[int] = None
    points: int = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=500)


class DailyPoints(BaseModel):
    date: date
    points: int
    day_name: str


class LedgerSummaryResponse(BaseModel):
    daily_points: int
    weekly_points: int
    total_points: int
    today: date
    week_start: date
    week_end: date
    daily_breakdown: List[DailyPoints]


class LedgerHistoryItem(BaseModel):
    id: int
    type: str  # goal_progress, task_completion, other
    points: int
    description: str
    created_at: datetime
    goal_id: Optional[int] = None
    goal_title: Optional[str] = None
    task_id: Optional[int] = None
    task_title: Optional[str] = None


# Goal schemas
class GoalBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_value: int = Field(..., ge=0)


class GoalCreate(GoalBase):
    goal_type: str = Field(default="goal", pattern="^(goal|project)$")
    current_value: int = Field(default=0, ge=0)


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_value: Optional[int] = Field(None, ge=0)
    status: Optional[str] = Field(None, pattern="^(active|paused|cancelled)$")


class GoalResponse(GoalBase):
    id: int
    goal_type: str
    current_value: int
    status: str
    progress_percentage: float
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProgressUpdate(BaseModel):
    progress_percentage: float = Field(..., ge=0, le=100)


class ProgressResult(BaseModel):
    goal_id: int
    title: str
    previous_value: int
    current_value: int
    target_value: int
    progress_percentage: float
    progress_change: int
    status: str
    message: str


# Task schemas
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    category: Optional[str] = None
    points: int = Field(default=10, ge=0, le=10000)


class TaskResponse(TaskCreate):
    id: int
    status: str
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Habit schemas
class HabitCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    points_per_completion: int = Field(default=5, ge=0, le=1000)


class HabitResponse(HabitCreate):
    id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class HabitCompletionResponse(BaseModel):
    id: int
    habit_id: int
    points_awarded: int
    completed_at: datetime
    completed_on: date

    class Config:
        from_attributes = True


# Education schemas
class EducationItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    points_value: int = Field(default=100, ge=1, le=10000)
    cost: Optional[float] = Field(None, ge=0)
    priority_level: int = Field(default=3, ge=1, le=5)
    target_date: Optional[date] = None


class EducationItemUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    points_value: Optional[int] = Field(None, ge=1, le=10000)
    cost: Optional[float] = Field(None, ge=0)
    # Completion goes through the complete endpoint so the points are awarded
    status: Optional[str] = Field(None, pattern="^(pending|in_progress)$")
    priority_level: Optional[int] = Field(None, ge=1, le=5)
    target_date: Optional[date] = None
    is_active: Optional[bool] = None


class EducationItemResponse(EducationItemCreate):
    id: int
    status: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class EducationComplete(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class EducationCompletionResponse(BaseModel):
    id: int
    education_item_id: int
    points_awarded: int
    notes: Optional[str] = None
    completed_at: datetime

    class Config:
        from_attributes = True


class EducationCompletionResult(BaseModel):
    completion: EducationCompletionResponse
    item: EducationItemResponse
    message: str


# Trophy schemas
class TrophyResponse(BaseModel):
    id: int
    threshold: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None

    class Config:
        from_attributes = True


class EarnedTrophyResponse(BaseModel):
    trophy: TrophyResponse
    habit_id: Optional[int] = None
    count_at_award: int
    awarded_at: datetime


class AwardFailure(BaseModel):
    trophy_id: int
    error: str


class AwardResult(BaseModel):
    family: str
    current_count: int
    awarded: List[TrophyResponse] = []
    failures: List[AwardFailure] = []
    message: str = ""


class TrophyListResponse(BaseModel):
    family: str
    trophies: List[TrophyResponse]
    earned: List[EarnedTrophyResponse]


# Streak schemas
class StreakResponse(BaseModel):
    current: int = 0
    longest: int = 0
    total: int = 0
    last_event_date: Optional[date] = None


class SigninResult(BaseModel):
    message: str
    already_signed_in: bool
    streak: StreakResponse
    awards: Optional[AwardResult] = None


class HabitCompletionResult(BaseModel):
    completion: HabitCompletionResponse
    streak: StreakResponse
    habit_awards: AwardResult
    total_awards: AwardResult
    message: str


# Priority schemas
class PriorityBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority_type: str = Field(..., pattern="^(ai_recommended|manual|fire_auto)$")
    priority_score: float = Field(default=0, ge=0, le=100)
    order_index: int = 0


class PriorityCreate(PriorityBase):
    is_completed: bool = False


class PriorityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority_type: Optional[str] = Field(None, pattern="^(ai_recommended|manual|fire_auto)$")
    priority_score: Optional[float] = Field(None, ge=0, le=100)
    order_index: Optional[int] = None
    is_completed: Optional[bool] = None


class PriorityResponse(PriorityBase):
    id: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PriorityReorderItem(BaseModel):
    id: int
    order_index: int


class PrioritySummary(BaseModel):
    id: int
    title: str
    priority_type: str
    is_completed: bool

    class Config:
        from_attributes = True


class DeduplicateResult(BaseModel):
    removed_count: int
    kept_count: int
    removed: List[PrioritySummary] = []
    message: str


class BatchResult(BaseModel):
    processed_count: int
    message: str


class CleanupSweepResult(BaseModel):
    users_scanned: int
    purged_count: int
    failed_count: int = 0


class MaintenanceResult(BaseModel):
    cleanup: CleanupSweepResult
    trophy_users_checked: int
    trophies_awarded: int
    ran_at: datetime


# Settings schemas
class SettingsUpdate(BaseModel):
    timezone: str = Field(..., min_length=1, max_length=64)


class SettingsResponse(SettingsUpdate):
    user_id: str
    reference_date: Optional[date] = None

    class Config:
        from_attributes = True
