"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from protein_tracker.adapters.openai_chat_client import OpenAIChatClient
from protein_tracker.config import Settings
from protein_tracker.services.analysis import AnalysisService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client = OpenAIChatClient.create(base_url=resolved_settings.openai_base_url)
    analysis_service = AnalysisService(
        client=chat_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
    )

    async def close_resources() -> None:
        # OpenAI clients are opened and closed per request.
        return None

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
