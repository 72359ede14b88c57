"""Signal aggregation for weekly recommendations.

Reads the two most recent check-ins and this week's completed sessions for a
user and normalizes them into a ``RecommendationInput``.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from ..config import config
from ..db import Database, get_db
from ..db.models import WeeklyCheckIn, TrainingSession
from .recommendations import Recommendation, RecommendationInput, evaluate

logger = logging.getLogger(__name__)


def week_start(now: Optional[datetime] = None) -> datetime:
    """Monday 00:00 of the week containing ``now``."""
    now = now or datetime.utcnow()
    monday = now.date() - timedelta(days=now.weekday())
    return datetime(monday.year, monday.month, monday.day)


class SignalAggregator:
    """Collect the latest check-in signals for one user."""

    def __init__(self, db: Optional[Database] = None, user_id: Optional[str] = None):
        self.db = db or get_db()
        self.user_id = user_id or config.DEFAULT_USER_ID

    def get_recent_checkins(self, session: Session, limit: int = 2) -> List[WeeklyCheckIn]:
        """Most recent check-ins, newest first."""
        return (
            session.query(WeeklyCheckIn)
            .filter(WeeklyCheckIn.user_id == self.user_id)
            .order_by(WeeklyCheckIn.created_at.desc(), WeeklyCheckIn.id.desc())
            .limit(limit)
            .all()
        )

    def count_completed_sessions(self, session: Session, now: Optional[datetime] = None) -> int:
        """Completed sessions since the start of the current week."""
        return (
            session.query(TrainingSession)
            .filter(
                TrainingSession.user_id == self.user_id,
                TrainingSession.completed.is_(True),
                TrainingSession.session_date >= week_start(now),
            )
            .count()
        )

    def build_input(self, now: Optional[datetime] = None) -> Optional[RecommendationInput]:
        """Build the engine input, or None when the user has no check-in yet."""
        with self.db.get_session() as session:
            checkins = self.get_recent_checkins(session)
            if not checkins:
                logger.info(f"No check-ins for user '{self.user_id}', no recommendation available")
                return None

            current = checkins[0]
            previous = checkins[1] if len(checkins) > 1 else None
            sessions_completed = self.count_completed_sessions(session, now)

            return RecommendationInput(
                current_weight=current.average_weight,
                previous_weight=previous.average_weight if previous else None,
                adherence=current.adherence_diet,
                rpe=current.rpe_avg,
                has_pain=current.has_pain,
                energy=current.energy_level,
                sessions_completed=sessions_completed,
            )


def get_weekly_recommendation(
    user_id: Optional[str] = None,
    db: Optional[Database] = None,
    now: Optional[datetime] = None,
    language: Optional[str] = None,
) -> Optional[Recommendation]:
    """Get this week's recommendation, or None when there is not enough data."""
    params = SignalAggregator(db=db, user_id=user_id).build_input(now)
    if params is None:
        return None
    return evaluate(params, language=language)
