"""Configuration management for the Weekly Coach tool."""

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./weekly_coach.db")

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LANGUAGE: str = os.getenv("COACH_LANGUAGE", "en")
    DEFAULT_USER_ID: str = os.getenv("DEFAULT_USER_ID", "default")
    SUPPORTED_LANGUAGES = ("en", "fr")

    # Weekly Recommendation Thresholds
    STALLED_LOSS_PERCENT: float = 0.25  # Weekly loss below this = stalled
    MAX_WEEKLY_LOSS_PERCENT: float = 1.0  # Weekly loss above this = too fast
    GOOD_ADHERENCE_PERCENT: int = 80  # Diet adherence at or above this = compliant
    HIGH_RPE: float = 9  # RPE at or above this = insufficient recovery
    COMFORTABLE_RPE: float = 7  # RPE at or below this = room to progress
    MIN_SESSIONS_FOR_PROGRESSION: int = 2

    # Adjustment sizes
    CALORIE_REDUCTION: int = 150  # kcal/day
    CALORIE_INCREASE: int = 100  # kcal/day
    SET_ADJUSTMENT: int = 1  # sets per exercise

    # Check-ins
    MAX_WEIGHT_MEASUREMENTS: int = 3
    JOURNAL_LIMIT: int = 10

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration."""
        if cls.LANGUAGE not in cls.SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported COACH_LANGUAGE '{cls.LANGUAGE}'. "
                f"Choose one of: {', '.join(cls.SUPPORTED_LANGUAGES)}"
            )
        return True


config = Config()
