"""Analysis module for weekly recommendations."""

from .recommendations import (
    Energy,
    InvalidInputError,
    Priority,
    Recommendation,
    RecommendationInput,
    RecommendationType,
    evaluate,
)
from .signals import SignalAggregator, get_weekly_recommendation

__all__ = [
    "Energy",
    "InvalidInputError",
    "Priority",
    "Recommendation",
    "RecommendationInput",
    "RecommendationType",
    "evaluate",
    "SignalAggregator",
    "get_weekly_recommendation",
]
