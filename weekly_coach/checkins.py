"""Recording of weekly check-ins, training sessions and the adjustments journal."""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from .config import config
from .db import Database, get_db
from .db.models import AdjustmentLog, TrainingSession, WeeklyCheckIn
from .analysis.recommendations import (
    Energy,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)

# Journal categories shown to users
JOURNAL_TYPES = {
    RecommendationType.NUTRITION: "calories",
    RecommendationType.TRAINING: "volume",
}


class CheckInError(ValueError):
    """Raised when a check-in cannot be recorded."""


def iso_week(now: Optional[datetime] = None) -> str:
    """ISO week label such as ``2026-W42``."""
    now = now or datetime.utcnow()
    year, week, _ = now.isocalendar()
    return f"{year}-W{week:02d}"


class CheckInService:
    """Store weekly check-ins and sessions for one user."""

    def __init__(self, db: Optional[Database] = None, user_id: Optional[str] = None):
        self.db = db or get_db()
        self.user_id = user_id or config.DEFAULT_USER_ID

    def record_checkin(
        self,
        weights: Sequence[Optional[float]],
        adherence: int,
        rpe: float,
        has_pain: bool,
        energy: str,
        blockers: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Record this week's check-in.

        Args:
            weights: Up to three weigh-ins in kg; missing ones may be None
            adherence: Diet adherence in percent
            rpe: Average perceived exertion (0-10)
            has_pain: Whether pain was felt during the week
            energy: Energy level (low, normal, high)
            blockers: Optional free-text comment
            now: Timestamp of the check-in, defaults to now

        Returns:
            ID of the stored check-in
        """
        now = now or datetime.utcnow()
        measures = [w for w in weights if w is not None]

        if not measures:
            raise CheckInError("At least one weight measurement is required")
        if len(measures) > config.MAX_WEIGHT_MEASUREMENTS:
            raise CheckInError(
                f"At most {config.MAX_WEIGHT_MEASUREMENTS} weight measurements per week, got {len(measures)}"
            )
        if any(not math.isfinite(w) or w <= 0 for w in measures):
            raise CheckInError("Weight measurements must be positive numbers")
        if isinstance(adherence, bool) or not isinstance(adherence, int) or not 0 <= adherence <= 100:
            raise CheckInError(f"Adherence must be between 0 and 100, got {adherence!r}")
        if isinstance(rpe, bool) or not isinstance(rpe, (int, float)) or not 0 <= rpe <= 10:
            raise CheckInError(f"RPE must be between 0 and 10, got {rpe!r}")
        if not isinstance(has_pain, bool):
            raise CheckInError(f"Pain flag must be a boolean, got {has_pain!r}")
        try:
            energy_level = Energy(energy).value
        except ValueError:
            raise CheckInError(f"Unknown energy level '{energy}'") from None

        week = iso_week(now)
        padded = measures + [None] * (config.MAX_WEIGHT_MEASUREMENTS - len(measures))

        with self.db.get_session() as session:
            existing = (
                session.query(WeeklyCheckIn)
                .filter_by(user_id=self.user_id, week_iso=week)
                .first()
            )
            if existing:
                raise CheckInError(f"A check-in already exists for week {week}")

            checkin = WeeklyCheckIn(
                user_id=self.user_id,
                week_iso=week,
                weight_measure_1=padded[0],
                weight_measure_2=padded[1],
                weight_measure_3=padded[2],
                average_weight=sum(measures) / len(measures),
                adherence_diet=adherence,
                rpe_avg=rpe,
                has_pain=has_pain,
                energy_level=energy_level,
                blockers=blockers or None,
                created_at=now,
            )
            session.add(checkin)
            session.flush()
            checkin_id = checkin.id

        logger.info(f"Stored check-in {checkin_id} for user '{self.user_id}' ({week})")
        return checkin_id

    def get_checkin(self, week: str) -> Optional[WeeklyCheckIn]:
        """Check-in for an ISO week label, if any."""
        with self.db.get_session() as session:
            return (
                session.query(WeeklyCheckIn)
                .filter_by(user_id=self.user_id, week_iso=week)
                .first()
            )

    def has_checkin_this_week(self, now: Optional[datetime] = None) -> bool:
        """Whether the current ISO week already has a check-in."""
        return self.get_checkin(iso_week(now)) is not None

    def weight_delta(self, now: Optional[datetime] = None) -> Optional[float]:
        """This week's average weight minus last week's, in kg."""
        now = now or datetime.utcnow()
        current = self.get_checkin(iso_week(now))
        previous = self.get_checkin(iso_week(now - timedelta(weeks=1)))
        if current is None or previous is None:
            return None
        return current.average_weight - previous.average_weight

    def record_session(self, session_date: Optional[datetime] = None, completed: bool = True) -> int:
        """Record a training session and return its ID."""
        with self.db.get_session() as session:
            training_session = TrainingSession(
                user_id=self.user_id,
                session_date=session_date or datetime.utcnow(),
                completed=completed,
            )
            session.add(training_session)
            session.flush()
            session_id = training_session.id

        logger.info(f"Stored session {session_id} for user '{self.user_id}' (completed={completed})")
        return session_id

    def log_adjustment(self, recommendation: Recommendation, old_value: Optional[str] = None) -> Optional[int]:
        """Journal an applied recommendation. "No change" results are not journaled."""
        journal_type = JOURNAL_TYPES.get(recommendation.type)
        if journal_type is None:
            return None

        with self.db.get_session() as session:
            entry = AdjustmentLog(
                user_id=self.user_id,
                type=journal_type,
                old_value=old_value,
                new_value=recommendation.action,
                reason=recommendation.reason,
            )
            session.add(entry)
            session.flush()
            entry_id = entry.id

        logger.info(f"Journaled {journal_type} adjustment {recommendation.action} for user '{self.user_id}'")
        return entry_id

    def get_adjustments(self, limit: Optional[int] = None) -> List[Dict]:
        """Latest journal entries, newest first."""
        with self.db.get_session() as session:
            entries = (
                session.query(AdjustmentLog)
                .filter_by(user_id=self.user_id)
                .order_by(AdjustmentLog.created_at.desc(), AdjustmentLog.id.desc())
                .limit(limit or config.JOURNAL_LIMIT)
                .all()
            )
            return [
                {
                    "id": entry.id,
                    "type": entry.type,
                    "old_value": entry.old_value,
                    "new_value": entry.new_value,
                    "reason": entry.reason,
                    "created_at": entry.created_at,
                }
                for entry in entries
            ]
