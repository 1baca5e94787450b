"""
Trophy and sign-in streak HTTP routes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from focusboard.auth import get_current_user_id, get_timezone_override
from focusboard.database import get_db
from focusboard.schemas import AwardResult, SigninResult, StreakResponse, TrophyListResponse
from focusboard.services.achievement_service import AchievementService
from focusboard.services.settings_service import SettingsService
from focusboard.services.streak_service import SigninStreakService, to_response

router = APIRouter(prefix="/api/trophies", tags=["trophies"])
signin_router = APIRouter(prefix="/api/signin", tags=["signin"])


@router.get("/{family}", response_model=TrophyListResponse)
def list_trophies(
    family: str,
    habit_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """All trophies of a family (discipline, total_habit, signin_streak) and the ones earned."""
    return AchievementService(db).list_trophies(user_id, family, habit_id)


@router.post("/discipline/check", response_model=AwardResult)
def check_habit_achievements(
    habit_id: int = Query(...),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return AchievementService(db).check_habit_achievements(user_id, habit_id)


@router.post("/total_habit/check", response_model=AwardResult)
def check_total_habit_achievements(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return AchievementService(db).check_total_habit_achievements(user_id)


@router.post("/signin_streak/check", response_model=AwardResult)
def check_signin_streak_achievements(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    today = SettingsService(db).get_reference_date(user_id, tz_override)
    return AchievementService(db).check_signin_streak_achievements(user_id, today)


@signin_router.post("", response_model=SigninResult)
def record_signin(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    """Record today's sign-in and award any sign-in streak trophies."""
    today = SettingsService(db).get_reference_date(user_id, tz_override)
    state, already_signed_in = SigninStreakService(db).record_signin(user_id, today)

    if already_signed_in:
        return SigninResult(
            message="Already signed in today",
            already_signed_in=True,
            streak=to_response(state),
        )

    awards = AchievementService(db).check_signin_streak_achievements(user_id, today)
    return SigninResult(
        message=f"Signed in! Current streak: {state.current} days",
        already_signed_in=False,
        streak=to_response(state),
        awards=awards,
    )


@signin_router.get("/streak", response_model=StreakResponse)
def get_signin_streak(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    today = SettingsService(db).get_reference_date(user_id, tz_override)
    return to_response(SigninStreakService(db).read_streak(user_id, today))
