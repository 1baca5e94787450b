"""
Streak calculation service.
Streak arithmetic is pure and works on calendar days supplied by the caller;
the caller resolves "today" in the user's timezone.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from focusboard.models import SigninLog, SigninStreak
from focusboard.repositories.base import store_operation
from focusboard.repositories.streak_repository import SigninRepository
from focusboard.schemas import StreakResponse

logger = logging.getLogger("focusboard.streaks")


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    longest: int = 0
    total: int = 0
    last_event_date: Optional[date] = None


def apply_event(state: StreakState, day: date) -> StreakState:
    """
    Fold one qualifying day into the streak.

    Same day as the last event: unchanged.
    The day after: current + 1.
    Later: current restarts at 1.
    Earlier than the last event: counts toward total only.
    """
    last = state.last_event_date
    if last is not None and day == last:
        return state
    if last is not None and day < last:
        return replace(state, total=state.total + 1)

    if last is not None and day == last + timedelta(days=1):
        current = state.current + 1
    else:
        current = 1

    return StreakState(
        current=current,
        longest=max(state.longest, current),
        total=state.total + 1,
        last_event_date=day,
    )


def project(state: StreakState, today: date) -> StreakState:
    """Streak as seen on `today`: broken if the last event is older than yesterday"""
    if state.last_event_date is None or today - state.last_event_date > timedelta(days=1):
        return replace(state, current=0)
    return state


def streak_from_days(days: Iterable[date], today: date) -> StreakState:
    """Build a projected streak from a set of event days"""
    state = StreakState()
    for day in sorted(set(days)):
        state = apply_event(state, day)
    return project(state, today)


def to_response(state: StreakState) -> StreakResponse:
    return StreakResponse(
        current=state.current,
        longest=state.longest,
        total=state.total,
        last_event_date=state.last_event_date,
    )


class SigninStreakService:
    """Service for daily sign-ins and the persisted sign-in streak"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SigninRepository()

    @staticmethod
    def _state_of(streak: Optional[SigninStreak]) -> StreakState:
        if streak is None:
            return StreakState()
        return StreakState(
            current=streak.current_streak or 0,
            longest=streak.longest_streak or 0,
            total=streak.total_count or 0,
            last_event_date=streak.last_event_date,
        )

    def record_signin(self, user_id: str, day: date) -> Tuple[StreakState, bool]:
        """
        Log a sign-in for `day` and advance the stored streak.

        Repeat sign-ins on the same day change nothing.

        Returns:
            (stored streak state, whether the day was already logged)
        """
        if self.repo.get_log(self.db, user_id, day):
            return self._state_of(self.repo.get_streak(self.db, user_id)), True

        with store_operation(self.db, "signin record"):
            try:
                self.repo.add_log(self.db, SigninLog(user_id=user_id, signin_date=day))
            except IntegrityError:
                # Concurrent sign-in for the same day won the insert
                self.db.rollback()
                return self._state_of(self.repo.get_streak(self.db, user_id)), True

            streak = self.repo.get_streak(self.db, user_id)
            if streak is None:
                streak = SigninStreak(user_id=user_id)
                self.db.add(streak)

            state = apply_event(self._state_of(streak), day)
            streak.current_streak = state.current
            streak.longest_streak = state.longest
            streak.total_count = state.total
            streak.last_event_date = state.last_event_date
            self.db.commit()

        logger.info(f"Sign-in user={user_id} day={day} streak={state.current}")
        return state, False

    def read_streak(self, user_id: str, today: date) -> StreakState:
        return project(self._state_of(self.repo.get_streak(self.db, user_id)), today)

    def get_current_streak(self, user_id: str, today: date) -> int:
        return self.read_streak(user_id, today).current
