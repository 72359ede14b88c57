"""Database module for the Weekly Coach tool."""

from .database import Database, get_db
from .models import WeeklyCheckIn, TrainingSession, AdjustmentLog

__all__ = ["Database", "get_db", "WeeklyCheckIn", "TrainingSession", "AdjustmentLog"]
