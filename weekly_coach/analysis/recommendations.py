"""Weekly recommendation engine.

Turns the latest weekly check-in into exactly one coaching directive. Rules are
evaluated in a fixed order and the first one that applies wins:

1. Stalled loss with good adherence -> cut calories
2. Loss too fast, very hard sessions or low energy -> add calories
3. Pain or very hard sessions -> drop a set
4. Comfortable sessions done consistently -> add a set
5. Otherwise -> no change

Nutrition corrections are checked before training-volume corrections. When no
previous weight is known the weekly change is taken as 0%, so rule 1 fires for
any compliant user even if rule 2's RPE or energy conditions also hold.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import config
from .messages import get_messages

logger = logging.getLogger(__name__)


class RecommendationType(Enum):
    """Domain targeted by a recommendation."""

    NUTRITION = "nutrition"
    TRAINING = "training"
    NONE = "none"


class Priority(Enum):
    """Advisory urgency, used for UI emphasis only."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Energy(Enum):
    """Self-reported weekly energy level."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class InvalidInputError(ValueError):
    """Raised when a recommendation input is malformed."""


def _require_number(name: str, value: Any) -> None:
    if value is None:
        raise InvalidInputError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")


def _require_int(name: str, value: Any) -> None:
    if value is None:
        raise InvalidInputError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class RecommendationInput:
    """Normalized signals from the latest check-ins."""

    current_weight: float  # kg
    adherence: int  # percent 0-100
    rpe: float  # 0-10
    has_pain: bool
    energy: Energy
    sessions_completed: int
    previous_weight: Optional[float] = None  # kg, None = no trend signal

    def __post_init__(self):
        _require_number("current_weight", self.current_weight)
        if self.current_weight <= 0:
            raise InvalidInputError(f"current_weight must be positive, got {self.current_weight}")

        if self.previous_weight is not None:
            _require_number("previous_weight", self.previous_weight)
            if self.previous_weight <= 0:
                raise InvalidInputError(f"previous_weight must be positive, got {self.previous_weight}")

        _require_int("adherence", self.adherence)
        if not 0 <= self.adherence <= 100:
            raise InvalidInputError(f"adherence must be between 0 and 100, got {self.adherence}")

        _require_number("rpe", self.rpe)

        if not isinstance(self.has_pain, bool):
            raise InvalidInputError(f"has_pain must be a boolean, got {self.has_pain!r}")

        _require_int("sessions_completed", self.sessions_completed)
        if self.sessions_completed < 0:
            raise InvalidInputError(f"sessions_completed cannot be negative, got {self.sessions_completed}")

        if not isinstance(self.energy, Energy):
            try:
                object.__setattr__(self, "energy", Energy(self.energy))
            except ValueError:
                raise InvalidInputError(
                    f"energy must be one of {[e.value for e in Energy]}, got {self.energy!r}"
                ) from None


@dataclass(frozen=True)
class Recommendation:
    """A single weekly coaching directive."""

    type: RecommendationType
    action: str
    message: str
    reason: str
    priority: Priority
    rule: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize with enum values as plain strings."""
        return {
            "type": self.type.value,
            "action": self.action,
            "message": self.message,
            "reason": self.reason,
            "priority": self.priority.value,
            "rule": self.rule,
        }


def weight_change_percent(params: RecommendationInput) -> float:
    """Week-over-week weight change in percent. Positive means weight lost."""
    if params.previous_weight is None:
        return 0.0
    return (params.previous_weight - params.current_weight) / params.previous_weight * 100


Predicate = Callable[[RecommendationInput, float], bool]
Builder = Callable[[RecommendationInput, float, Dict[str, str]], Recommendation]


@dataclass(frozen=True)
class Rule:
    """An ordered decision rule: when ``applies`` holds, ``build`` the result."""

    name: str
    applies: Predicate
    build: Builder


# Rule 1: stalled loss

def _stalled_loss_applies(params: RecommendationInput, change: float) -> bool:
    return change < config.STALLED_LOSS_PERCENT and params.adherence >= config.GOOD_ADHERENCE_PERCENT


def _stalled_loss(params: RecommendationInput, change: float, messages: Dict[str, str]) -> Recommendation:
    return Recommendation(
        type=RecommendationType.NUTRITION,
        action=f"-{config.CALORIE_REDUCTION}kcal",
        message=messages["stalled_loss.message"].format(kcal=config.CALORIE_REDUCTION),
        reason=messages["stalled_loss.reason"].format(
            weight_change=change,
            target=config.STALLED_LOSS_PERCENT,
            adherence=params.adherence,
        ),
        priority=Priority.HIGH,
        rule="stalled_loss",
    )


# Rule 2: loss too fast or poor recovery

def _recovery_deficit_applies(params: RecommendationInput, change: float) -> bool:
    return (
        change > config.MAX_WEEKLY_LOSS_PERCENT
        or params.rpe >= config.HIGH_RPE
        or params.energy is Energy.LOW
    )


def _recovery_deficit(params: RecommendationInput, change: float, messages: Dict[str, str]) -> Recommendation:
    # Only the first triggering condition is explained
    if change > config.MAX_WEEKLY_LOSS_PERCENT:
        reason = messages["recovery_deficit.reason.rate"].format(
            weight_change=change, limit=config.MAX_WEEKLY_LOSS_PERCENT
        )
    elif params.rpe >= config.HIGH_RPE:
        reason = messages["recovery_deficit.reason.rpe"].format(rpe=params.rpe)
    else:
        reason = messages["recovery_deficit.reason.energy"]

    return Recommendation(
        type=RecommendationType.NUTRITION,
        action=f"+{config.CALORIE_INCREASE}kcal",
        message=messages["recovery_deficit.message"].format(kcal=config.CALORIE_INCREASE),
        reason=reason,
        priority=Priority.HIGH,
        rule="recovery_deficit",
    )


# Rule 3: pain or overreach

def _training_overreach_applies(params: RecommendationInput, change: float) -> bool:
    return params.has_pain or params.rpe >= config.HIGH_RPE


def _training_overreach(params: RecommendationInput, change: float, messages: Dict[str, str]) -> Recommendation:
    if params.has_pain:
        reason = messages["training_overreach.reason.pain"]
    else:
        reason = messages["training_overreach.reason.rpe"].format(rpe=params.rpe)

    return Recommendation(
        type=RecommendationType.TRAINING,
        action=f"-{config.SET_ADJUSTMENT} set",
        message=messages["training_overreach.message"].format(sets=config.SET_ADJUSTMENT),
        reason=reason,
        priority=Priority.HIGH,
        rule="training_overreach",
    )


# Rule 4: comfortable and consistent

def _volume_progression_applies(params: RecommendationInput, change: float) -> bool:
    return (
        params.rpe <= config.COMFORTABLE_RPE
        and params.sessions_completed >= config.MIN_SESSIONS_FOR_PROGRESSION
    )


def _volume_progression(params: RecommendationInput, change: float, messages: Dict[str, str]) -> Recommendation:
    return Recommendation(
        type=RecommendationType.TRAINING,
        action=f"+{config.SET_ADJUSTMENT} set",
        message=messages["volume_progression.message"].format(sets=config.SET_ADJUSTMENT),
        reason=messages["volume_progression.reason"].format(
            rpe=params.rpe, sessions=params.sessions_completed
        ),
        priority=Priority.MEDIUM,
        rule="volume_progression",
    )


# Rule 5: catch-all

def _on_track(params: RecommendationInput, change: float, messages: Dict[str, str]) -> Recommendation:
    return Recommendation(
        type=RecommendationType.NONE,
        action="no_change",
        message=messages["on_track.message"],
        reason=messages["on_track.reason"],
        priority=Priority.LOW,
        rule="on_track",
    )


RULES: Tuple[Rule, ...] = (
    Rule("stalled_loss", _stalled_loss_applies, _stalled_loss),
    Rule("recovery_deficit", _recovery_deficit_applies, _recovery_deficit),
    Rule("training_overreach", _training_overreach_applies, _training_overreach),
    Rule("volume_progression", _volume_progression_applies, _volume_progression),
)

DEFAULT_RULE = Rule("on_track", lambda params, change: True, _on_track)


def evaluate(params: RecommendationInput, language: Optional[str] = None) -> Recommendation:
    """Produce the weekly recommendation for a check-in.

    Args:
        params: Validated signals from the latest check-ins
        language: Message language, defaults to ``config.LANGUAGE``

    Returns:
        The recommendation of the first rule that applies
    """
    messages = get_messages(language)
    change = weight_change_percent(params)

    for rule in RULES:
        if rule.applies(params, change):
            logger.debug(f"Rule '{rule.name}' fired (weight change {change:.2f}%)")
            return rule.build(params, change, messages)

    logger.debug(f"No adjustment rule fired (weight change {change:.2f}%)")
    return DEFAULT_RULE.build(params, change, messages)
