"""Database models for weekly check-ins, training sessions and adjustments."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class WeeklyCheckIn(Base):
    """User-submitted weekly check-in."""

    __tablename__ = "weekly_checkins"
    __table_args__ = (UniqueConstraint("user_id", "week_iso", name="uq_checkin_user_week"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String(50), default="default", nullable=False)
    week_iso = Column(String(10), nullable=False)  # e.g. 2026-W42

    # Up to three weigh-ins during the week, averaged into average_weight
    weight_measure_1 = Column(Float)  # kg
    weight_measure_2 = Column(Float)  # kg
    weight_measure_3 = Column(Float)  # kg
    average_weight = Column(Float, nullable=False)  # kg

    adherence_diet = Column(Integer, nullable=False)  # percent 0-100
    rpe_avg = Column(Float, nullable=False)  # 0-10
    has_pain = Column(Boolean, default=False, nullable=False)
    energy_level = Column(String(10), nullable=False)  # low, normal, high
    blockers = Column(Text)  # free-text comment
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<WeeklyCheckIn(user_id={self.user_id}, week={self.week_iso}, weight={self.average_weight})>"


class TrainingSession(Base):
    """A planned or completed training session."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(50), default="default", nullable=False)
    session_date = Column(DateTime, nullable=False)
    completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<TrainingSession(user_id={self.user_id}, date={self.session_date}, completed={self.completed})>"


class AdjustmentLog(Base):
    """Journal of applied coaching adjustments."""

    __tablename__ = "adjustments_log"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(50), default="default", nullable=False)
    type = Column(String(20), nullable=False)  # calories, volume
    old_value = Column(String(50))
    new_value = Column(String(50))
    reason = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<AdjustmentLog(user_id={self.user_id}, type={self.type}, new_value={self.new_value})>"
