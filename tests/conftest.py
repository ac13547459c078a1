"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import pytest

from protein_tracker.config import Settings
from protein_tracker.containers import AppContainer
from protein_tracker.domain.errors import GatewayRequestError
from protein_tracker.services.analysis import AnalysisService, ChatCompletionClient
from protein_tracker.services.tracker import GatewayClient

EGG_RESULT: dict[str, object] = {
    "foods": [{"name": "Egg", "quantity": "50g", "protein": 6}],
    "totalProtein": 6,
}

CHICKEN_RICE_RESULT: dict[str, object] = {
    "foods": [
        {"name": "Chicken Breast", "quantity": "150g", "protein": 45},
        {"name": "Cooked Rice", "quantity": "200g", "protein": 4},
    ],
    "totalProtein": 49,
}

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"meal-photo"


@dataclass
class FakeChatClient(ChatCompletionClient):
    """Fake chat client returning a fixed reply and recording calls."""

    reply: str | None = field(default_factory=lambda: json.dumps(CHICKEN_RICE_RESULT))
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str | None:
        self.calls.append(
            {
                "api_key": api_key,
                "model": model,
                "max_tokens": max_tokens,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "image_url": image_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class FakeGatewayClient(GatewayClient):
    """Fake gateway returning queued results or errors."""

    results: list[dict[str, object] | Exception] = field(default_factory=list)
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def analyze(self, image_data_url: str, api_key: str) -> dict[str, object]:
        self.calls.append((image_data_url, api_key))
        result = self.results.pop(0) if self.results else CHICKEN_RICE_RESULT
        if isinstance(result, Exception):
            raise result
        return result


def gateway_error(message: str) -> GatewayRequestError:
    return GatewayRequestError(message, status_code=500)


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_model="gpt-4o", openai_max_tokens=1000)


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def container(settings: Settings, chat_client: FakeChatClient) -> AppContainer:
    analysis_service = AnalysisService(
        client=chat_client,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
