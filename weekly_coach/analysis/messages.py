"""User-facing message templates for weekly recommendations.

Templates are plain ``str.format`` strings. Reasons receive the figures that
justify them so the text can always be reproduced from the check-in inputs.
"""

from typing import Dict, Optional

from ..config import config


MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "stalled_loss.message": "Cut {kcal} kcal/day to restart weight loss",
        "stalled_loss.reason": (
            "Weekly loss {weight_change:.2f}% (target ≥{target:g}%) "
            "despite {adherence:g}% adherence"
        ),
        "recovery_deficit.message": "Add {kcal} kcal/day to recover better",
        "recovery_deficit.reason.rate": "Weekly loss too fast: {weight_change:.2f}% (max {limit:g}%)",
        "recovery_deficit.reason.rpe": "High RPE ({rpe:g}/10) = insufficient recovery",
        "recovery_deficit.reason.energy": "Low energy level reported",
        "training_overreach.message": "Drop {sets} set per exercise and favour gentle movements",
        "training_overreach.reason.pain": "Pain reported: recovery comes first",
        "training_overreach.reason.rpe": "RPE too high ({rpe:g}/10): risk of overtraining",
        "volume_progression.message": "Add {sets} set to your main exercises to keep progressing",
        "volume_progression.reason": (
            "Comfortable RPE ({rpe:g}/10) + {sessions} sessions done: "
            "you can increase volume"
        ),
        "on_track.message": "Keep it up, you're making great progress! 🎯",
        "on_track.reason": "All indicators are in the optimal zone",
    },
    "fr": {
        "stalled_loss.message": "Réduis de {kcal} kcal/jour pour relancer la perte de poids",
        "stalled_loss.reason": (
            "Perte hebdo {weight_change:.2f}% (objectif ≥{target:g}%) "
            "malgré {adherence:g}% d'adhérence"
        ),
        "recovery_deficit.message": "Augmente de {kcal} kcal/jour pour mieux récupérer",
        "recovery_deficit.reason.rate": "Perte hebdo trop rapide : {weight_change:.2f}% (max {limit:g}%)",
        "recovery_deficit.reason.rpe": "RPE élevé ({rpe:g}/10) = récupération insuffisante",
        "recovery_deficit.reason.energy": "Niveau d'énergie faible signalé",
        "training_overreach.message": "Réduis de {sets} série par exercice + privilégie les mouvements doux",
        "training_overreach.reason.pain": "Douleur signalée : priorité à la récupération",
        "training_overreach.reason.rpe": "RPE trop élevé ({rpe:g}/10) : risque de surentraînement",
        "volume_progression.message": "Ajoute {sets} série sur tes exercices principaux pour progresser",
        "volume_progression.reason": (
            "RPE confortable ({rpe:g}/10) + {sessions} séances faites : "
            "tu peux monter en volume"
        ),
        "on_track.message": "Continue comme ça, tu progresses bien ! 🎯",
        "on_track.reason": "Tous les indicateurs sont dans la zone optimale",
    },
}


def get_messages(language: Optional[str] = None) -> Dict[str, str]:
    """Get the message catalog for a language (defaults to the configured one)."""
    language = language or config.LANGUAGE
    try:
        return MESSAGES[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language '{language}'. Choose one of: {', '.join(sorted(MESSAGES))}"
        ) from None
