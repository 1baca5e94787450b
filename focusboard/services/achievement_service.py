"""
Achievement service - threshold trophies.

All three trophy families run the same algorithm: count the qualifying
events, take every trophy whose threshold is within the count, subtract the
ones already awarded and insert the rest. Each insert runs in its own
savepoint; a unique-constraint violation means another request awarded the
trophy first and is treated as already awarded.
"""
import logging
from datetime import date
from typing import Callable, Dict, List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from focusboard.constants import (
    TROPHY_FAMILY_DISCIPLINE, TROPHY_FAMILY_SIGNIN_STREAK, TROPHY_FAMILY_TOTAL_HABIT
)
from focusboard.exceptions import NotFoundException, ValidationException
from focusboard.models import (
    DisciplineTrophy, SigninStreakTrophy, TotalHabitTrophy,
    UserDisciplineTrophy, UserSigninStreakTrophy, UserTotalHabitTrophy
)
from focusboard.repositories.base import store_operation
from focusboard.repositories.habit_repository import HabitCompletionRepository, HabitRepository
from focusboard.repositories.trophy_repository import TrophyRepository
from focusboard.schemas import (
    AwardFailure, AwardResult, EarnedTrophyResponse, TrophyListResponse, TrophyResponse
)
from focusboard.services.streak_service import SigninStreakService

logger = logging.getLogger("focusboard.achievements")

CountSource = Callable[[Session, str, Optional[int]], int]


class ThresholdAwarder:
    """
    Awards every not-yet-awarded trophy whose threshold the count has reached.

    Args:
        family: Family name reported in results
        trophy_model: Reference table of trophies
        award_model: Per-user award table
        count_source: (db, user_id, scope_id) -> current count
        scope_column: Award column holding the scope id (per-habit family only)
    """

    def __init__(
        self,
        family: str,
        trophy_model,
        award_model,
        count_source: CountSource,
        scope_column: Optional[str] = None
    ):
        self.family = family
        self.trophy_model = trophy_model
        self.award_model = award_model
        self.count_source = count_source
        self.scope_column = scope_column
        self.repo = TrophyRepository()

    def check_and_award(self, db: Session, user_id: str, scope_id: Optional[int] = None) -> AwardResult:
        count = self.count_source(db, user_id, scope_id)
        eligible = self.repo.get_eligible(db, self.trophy_model, count)
        already_awarded = self.repo.get_awarded_ids(
            db, self.award_model, user_id, self.scope_column, scope_id
        )

        awarded: List[TrophyResponse] = []
        failures: List[AwardFailure] = []
        for trophy in eligible:
            if trophy.id in already_awarded:
                continue

            award = self.award_model(user_id=user_id, trophy_id=trophy.id, count_at_award=count)
            if self.scope_column:
                setattr(award, self.scope_column, scope_id)

            try:
                with db.begin_nested():
                    db.add(award)
            except IntegrityError:
                logger.info(f"{self.family} trophy {trophy.id} already awarded to user {user_id}")
                continue
            except SQLAlchemyError as e:
                logger.error(f"Failed to award {self.family} trophy {trophy.id} to user {user_id}: {e}")
                failures.append(AwardFailure(trophy_id=trophy.id, error=str(e)))
                continue

            awarded.append(TrophyResponse.model_validate(trophy))

        with store_operation(db, f"{self.family} award"):
            db.commit()

        if awarded:
            names = ", ".join(t.name for t in awarded)
            message = f"Earned {len(awarded)} new trophies: {names}"
            logger.info(f"User {user_id} earned {self.family} trophies {[t.id for t in awarded]} at count {count}")
        else:
            message = "No new trophies"

        return AwardResult(
            family=self.family,
            current_count=count,
            awarded=awarded,
            failures=failures,
            message=message,
        )


def _habit_completion_count(db: Session, user_id: str, habit_id: Optional[int]) -> int:
    return HabitCompletionRepository.count_for_habit(db, user_id, habit_id)


def _total_completion_count(db: Session, user_id: str, scope_id: Optional[int]) -> int:
    return HabitCompletionRepository.count_total(db, user_id)


discipline_awarder = ThresholdAwarder(
    TROPHY_FAMILY_DISCIPLINE,
    DisciplineTrophy,
    UserDisciplineTrophy,
    _habit_completion_count,
    scope_column="habit_id",
)

total_habit_awarder = ThresholdAwarder(
    TROPHY_FAMILY_TOTAL_HABIT,
    TotalHabitTrophy,
    UserTotalHabitTrophy,
    _total_completion_count,
)


def signin_streak_awarder(today: date) -> ThresholdAwarder:
    """Sign-in family counting the streak as seen on `today`"""
    def current_streak(db: Session, user_id: str, scope_id: Optional[int]) -> int:
        return SigninStreakService(db).get_current_streak(user_id, today)

    return ThresholdAwarder(
        TROPHY_FAMILY_SIGNIN_STREAK,
        SigninStreakTrophy,
        UserSigninStreakTrophy,
        current_streak,
    )


FAMILY_MODELS: Dict[str, tuple] = {
    TROPHY_FAMILY_DISCIPLINE: (DisciplineTrophy, UserDisciplineTrophy, "habit_id"),
    TROPHY_FAMILY_TOTAL_HABIT: (TotalHabitTrophy, UserTotalHabitTrophy, None),
    TROPHY_FAMILY_SIGNIN_STREAK: (SigninStreakTrophy, UserSigninStreakTrophy, None),
}


class AchievementService:
    """Service for checking and listing trophies"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.trophy_repo = TrophyRepository()

    def check_habit_achievements(self, user_id: str, habit_id: int) -> AwardResult:
        """Per-habit completion-count trophies; the habit must belong to the user"""
        if habit_id is None:
            raise ValidationException("habit_id", "habit_id is required")
        if not self.habit_repo.get_by_id(self.db, habit_id, user_id):
            raise NotFoundException("Habit", habit_id)
        return discipline_awarder.check_and_award(self.db, user_id, habit_id)

    def check_total_habit_achievements(self, user_id: str) -> AwardResult:
        return total_habit_awarder.check_and_award(self.db, user_id)

    def check_signin_streak_achievements(self, user_id: str, today: date) -> AwardResult:
        return signin_streak_awarder(today).check_and_award(self.db, user_id)

    def list_trophies(
        self, user_id: str, family: str, habit_id: Optional[int] = None
    ) -> TrophyListResponse:
        """All trophies of a family plus the ones the user has earned"""
        if family not in FAMILY_MODELS:
            raise ValidationException("family", f"Unknown trophy family '{family}'")
        trophy_model, award_model, scope_column = FAMILY_MODELS[family]

        trophies = {t.id: t for t in self.trophy_repo.get_all(self.db, trophy_model)}
        awards = self.trophy_repo.get_awards(
            self.db, award_model, user_id, scope_column, habit_id
        )

        earned = []
        for award in awards:
            trophy = trophies.get(award.trophy_id)
            if trophy is None:
                continue
            earned.append(EarnedTrophyResponse(
                trophy=TrophyResponse.model_validate(trophy),
                habit_id=getattr(award, "habit_id", None),
                count_at_award=award.count_at_award or 0,
                awarded_at=award.awarded_at,
            ))

        return TrophyListResponse(
            family=family,
            trophies=[TrophyResponse.model_validate(t) for t in trophies.values()],
            earned=earned,
        )
