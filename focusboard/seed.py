"""Default trophy definitions for the three trophy families."""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from focusboard.constants import (
    TROPHY_FAMILY_DISCIPLINE, TROPHY_FAMILY_SIGNIN_STREAK, TROPHY_FAMILY_TOTAL_HABIT
)
from focusboard.repositories.base import store_operation
from focusboard.repositories.trophy_repository import TrophyRepository
from focusboard.services.achievement_service import FAMILY_MODELS

logger = logging.getLogger("focusboard.seed")

TROPHY_SEED_DATA: Dict[str, List[dict]] = {
    TROPHY_FAMILY_DISCIPLINE: [
        {"threshold": 1, "name": "First Step", "description": "Complete a habit for the first time", "icon": "footprints"},
        {"threshold": 7, "name": "One Week In", "description": "Complete the same habit 7 times", "icon": "calendar"},
        {"threshold": 30, "name": "Habit Formed", "description": "Complete the same habit 30 times", "icon": "anchor"},
        {"threshold": 100, "name": "Centurion", "description": "Complete the same habit 100 times", "icon": "shield"},
        {"threshold": 365, "name": "Year of Discipline", "description": "Complete the same habit 365 times", "icon": "crown"},
    ],
    TROPHY_FAMILY_TOTAL_HABIT: [
        {"threshold": 10, "name": "Getting Started", "description": "10 habit completions in total", "icon": "sparkles"},
        {"threshold": 50, "name": "Building Momentum", "description": "50 habit completions in total", "icon": "rocket"},
        {"threshold": 250, "name": "Routine Master", "description": "250 habit completions in total", "icon": "medal"},
        {"threshold": 1000, "name": "Unstoppable", "description": "1000 habit completions in total", "icon": "trophy"},
    ],
    TROPHY_FAMILY_SIGNIN_STREAK: [
        {"threshold": 3, "name": "Warming Up", "description": "Sign in 3 days in a row", "icon": "flame"},
        {"threshold": 7, "name": "Full Week", "description": "Sign in 7 days in a row", "icon": "fire"},
        {"threshold": 30, "name": "Monthly Regular", "description": "Sign in 30 days in a row", "icon": "star"},
        {"threshold": 100, "name": "Dedicated", "description": "Sign in 100 days in a row", "icon": "gem"},
    ],
}


def seed_trophies(db: Session) -> int:
    """Upsert default trophies by threshold. Returns number of definitions written."""
    seeded = 0
    with store_operation(db, "trophy seed"):
        for family, definitions in TROPHY_SEED_DATA.items():
            trophy_model = FAMILY_MODELS[family][0]
            for definition in definitions:
                trophy = TrophyRepository.get_by_threshold(db, trophy_model, definition["threshold"])
                if trophy is None:
                    db.add(trophy_model(**definition))
                else:
                    for key, value in definition.items():
                        setattr(trophy, key, value)
                seeded += 1
        db.commit()

    logger.info(f"Seeded {seeded} trophy definitions")
    return seeded
