"""
Sign-in streak repository - Data access for sign-in logs and streak state.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.models import SigninLog, SigninStreak


class SigninRepository:
    """Repository for SigninLog and SigninStreak data access"""

    @staticmethod
    def get_log(db: Session, user_id: str, signin_date: date) -> Optional[SigninLog]:
        return db.query(SigninLog).filter(
            SigninLog.user_id == user_id,
            SigninLog.signin_date == signin_date
        ).first()

    @staticmethod
    def add_log(db: Session, log: SigninLog) -> SigninLog:
        """Stage a log row; the unique (user_id, signin_date) constraint fires on flush"""
        db.add(log)
        db.flush()
        return log

    @staticmethod
    def get_streak(db: Session, user_id: str) -> Optional[SigninStreak]:
        return db.query(SigninStreak).filter(SigninStreak.user_id == user_id).first()

    @staticmethod
    def get_all_streaks(db: Session) -> List[SigninStreak]:
        return db.query(SigninStreak).all()
