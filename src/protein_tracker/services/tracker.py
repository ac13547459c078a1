"""Session tracker for profile, meal history and daily protein progress."""

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from protein_tracker.domain.errors import GatewayRequestError, ValidationError
from protein_tracker.domain.meals import MealAnalysis
from protein_tracker.domain.profile import (
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
    FitnessGoal,
    Profile,
    is_valid_weight,
)
from protein_tracker.services.progress import (
    DailyProgress,
    build_progress,
    compute_daily_goal,
    compute_daily_total,
    compute_progress_percentage,
    compute_remaining,
)

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Please provide an OpenAI API key and select an image"
IN_FLIGHT_MESSAGE = "An analysis is already in progress. Please wait for it to finish."
UNEXPECTED_RESULT_MESSAGE = "Unexpected analysis result format"


class GatewayClient(Protocol):
    """Interface for calling the meal analysis gateway."""

    async def analyze(self, image_data_url: str, api_key: str) -> dict[str, object]:
        """Return the gateway's nutrition result; raise GatewayRequestError."""


@dataclass
class ImageSelection:
    """Image picked by the user and not yet cleared."""

    content: bytes
    filename: str | None = None


def _default_clock() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class SessionTracker:
    """Client-side state machine for one tracking session.

    ``daily_goal`` and ``daily_total`` are computed on every read from the
    profile and the meal history; they are never stored.
    """

    gateway: GatewayClient
    profile: Profile = field(default_factory=Profile)
    api_key: str = ""
    meal_history: list[MealAnalysis] = field(default_factory=list)
    selection: ImageSelection | None = None
    current_analysis: MealAnalysis | None = None
    error: str = ""
    analyzing: bool = False
    clock: Callable[[], str] = _default_clock

    @property
    def daily_goal(self) -> int:
        """Daily protein target in grams."""
        return compute_daily_goal(self.profile)

    @property
    def daily_total(self) -> int | float:
        """Protein logged so far today."""
        return compute_daily_total(self.meal_history)

    @property
    def progress_percentage(self) -> float:
        """Share of the daily goal reached, clamped to [0, 100]."""
        return compute_progress_percentage(self.daily_total, self.daily_goal)

    @property
    def remaining(self) -> int | float:
        """Grams of protein left to reach the goal."""
        return compute_remaining(self.daily_total, self.daily_goal)

    def progress(self) -> DailyProgress:
        """Return a progress snapshot."""
        return build_progress(self.profile, self.meal_history)

    def set_weight(self, weight_kg: float) -> None:
        """Update the body weight, rejecting values outside the allowed range."""
        if not is_valid_weight(weight_kg):
            raise ValidationError(
                f"Weight must be between {MIN_WEIGHT_KG} and {MAX_WEIGHT_KG} kg"
            )
        self.profile = replace(self.profile, weight_kg=weight_kg)

    def set_goal(self, goal: FitnessGoal | str) -> None:
        """Update the fitness goal."""
        try:
            resolved = FitnessGoal(goal)
        except ValueError as exc:
            raise ValidationError(f"Unknown fitness goal: {goal}") from exc
        self.profile = replace(self.profile, goal=resolved)

    def set_api_key(self, api_key: str) -> None:
        """Store the credential used for gateway calls."""
        self.api_key = api_key

    def select_image(self, content: bytes, filename: str | None = None) -> None:
        """Select a new meal photo and clear the previous result."""
        self.selection = ImageSelection(content=content, filename=filename)
        self.error = ""
        self.current_analysis = None

    async def analyze_meal(self) -> MealAnalysis | None:
        """Send the selected photo to the gateway and log the result.

        Failures are reported through ``error``; the history is only changed
        on success.
        """
        if self.selection is None or not self.api_key:
            self.error = MISSING_INPUT_MESSAGE
            return None
        if self.analyzing:
            self.error = IN_FLIGHT_MESSAGE
            return None

        self.analyzing = True
        self.error = ""
        try:
            data_url = to_data_url(self.selection.content)
            try:
                payload = await self.gateway.analyze(data_url, self.api_key)
            except GatewayRequestError as exc:
                logger.warning("Meal analysis failed: %s", exc)
                self.error = str(exc)
                return None
            try:
                analysis = MealAnalysis.from_gateway(payload, timestamp=self.clock())
            except PydanticValidationError:
                logger.warning("Gateway returned an unexpected payload")
                self.error = UNEXPECTED_RESULT_MESSAGE
                return None
            self.current_analysis = analysis
            self.meal_history.append(analysis)
            return analysis
        finally:
            self.analyzing = False

    def reset_day(self) -> None:
        """Clear the day's meals and the pending selection, keeping the profile."""
        self.meal_history = []
        self.current_analysis = None
        self.selection = None


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
