"""Derived daily protein progress."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from protein_tracker.domain.meals import MealAnalysis
from protein_tracker.domain.profile import Profile

HIGH_PROTEIN_SUGGESTIONS: tuple[str, ...] = (
    "Chicken breast (31g per 100g)",
    "Paneer (18g per 100g)",
    "Greek yogurt (10g per 100g)",
    "Eggs (13g per 100g)",
    "Lentils (9g per 100g)",
    "a protein shake (20-30g per serving)",
)


@dataclass(frozen=True)
class DailyProgress:
    """Snapshot of the day's protein progress."""

    daily_goal: int
    daily_total: int | float
    remaining: int | float
    progress_percentage: float
    goal_reached: bool


def compute_daily_goal(profile: Profile) -> int:
    """Return the daily protein target in grams, rounded half up."""
    return math.floor(profile.weight_kg * profile.protein_multiplier + 0.5)


def compute_daily_total(meals: Iterable[MealAnalysis]) -> int | float:
    """Return the sum of the reported protein of every meal."""
    return sum(meal.total_protein for meal in meals)


def compute_progress_percentage(daily_total: float, daily_goal: float) -> float:
    """Return the share of the goal reached, clamped to [0, 100]."""
    if daily_goal <= 0:
        return 100.0 if daily_total > 0 else 0.0
    return max(min(daily_total / daily_goal * 100, 100.0), 0.0)


def compute_remaining(daily_total: float, daily_goal: float) -> int | float:
    """Return the grams left to reach the goal, never negative."""
    return max(daily_goal - daily_total, 0)


def build_progress(profile: Profile, meals: Iterable[MealAnalysis]) -> DailyProgress:
    """Compute the full progress snapshot."""
    daily_goal = compute_daily_goal(profile)
    daily_total = compute_daily_total(meals)
    return DailyProgress(
        daily_goal=daily_goal,
        daily_total=daily_total,
        remaining=compute_remaining(daily_total, daily_goal),
        progress_percentage=compute_progress_percentage(daily_total, daily_goal),
        goal_reached=daily_total >= daily_goal,
    )


def format_feedback(progress: DailyProgress) -> str:
    """Return the user-facing progress message."""
    if progress.goal_reached:
        return "Congratulations! You've reached your daily protein goal!"
    lines = [
        f"You need {progress.remaining:g}g more protein "
        "to reach your daily target.",
        "Try adding: " + ", ".join(HIGH_PROTEIN_SUGGESTIONS[:-1])
        + f", or {HIGH_PROTEIN_SUGGESTIONS[-1]}",
    ]
    return "\n".join(lines)


def format_progress_bar(progress: DailyProgress) -> str:
    """Format the progress label, e.g. ``49g / 112g (43.8%)``."""
    return (
        f"{progress.daily_total:g}g / {progress.daily_goal}g "
        f"({progress.progress_percentage:.1f}%)"
    )


def meal_history_lines(meals: Iterable[MealAnalysis]) -> list[str]:
    """Format one line per logged meal."""
    return [f"{meal.timestamp}: +{meal.total_protein:g}g protein" for meal in meals]


def format_meal_analysis(meal: MealAnalysis) -> str:
    """Format the per-item breakdown of a single analysis."""
    lines = ["Analysis results:"]
    for food in meal.foods:
        protein = "?" if food.protein is None else f"{food.protein:g}"
        lines.append(f"- {food.name} ({food.quantity}): {protein}g")
    lines.append(f"Total protein in this meal: {meal.total_protein:g}g")
    return "\n".join(lines)
