"""User profile inputs for goal derivation."""

from dataclasses import dataclass
from enum import StrEnum

MIN_WEIGHT_KG = 30
MAX_WEIGHT_KG = 200


class FitnessGoal(StrEnum):
    """Fitness goal selected by the user."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


PROTEIN_MULTIPLIERS: dict[FitnessGoal, float] = {
    FitnessGoal.LOSE: 1.2,
    FitnessGoal.MAINTAIN: 1.6,
    FitnessGoal.GAIN: 2.0,
}


@dataclass(frozen=True)
class Profile:
    """Body weight and fitness goal."""

    weight_kg: float = 70
    goal: FitnessGoal = FitnessGoal.MAINTAIN

    @property
    def protein_multiplier(self) -> float:
        """Grams of protein per kilogram of body weight for the goal."""
        return PROTEIN_MULTIPLIERS[self.goal]


def is_valid_weight(weight_kg: float) -> bool:
    """Return True when the weight is inside the accepted range."""
    return MIN_WEIGHT_KG <= weight_kg <= MAX_WEIGHT_KG
