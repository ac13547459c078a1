"""Tests for the meal analysis gateway service."""

import asyncio

import pytest

from protein_tracker.domain.errors import (
    UpstreamError,
    UpstreamFormatError,
    ValidationError,
)
from protein_tracker.services.analysis import (
    SYSTEM_PROMPT,
    USER_PROMPT,
    AnalysisService,
    extract_json_object,
)
from tests.conftest import CHICKEN_RICE_RESULT, FakeChatClient

IMAGE = "data:image/png;base64,ZmFrZQ=="


def _service(client: FakeChatClient) -> AnalysisService:
    return AnalysisService(client=client, model="gpt-4o", max_tokens=1000)


def test_analyze_returns_parsed_result() -> None:
    client = FakeChatClient()

    result = asyncio.run(_service(client).analyze(image=IMAGE, api_key="sk-test"))

    assert result == CHICKEN_RICE_RESULT


def test_analyze_sends_fixed_prompts_and_budget() -> None:
    client = FakeChatClient()

    asyncio.run(_service(client).analyze(image=IMAGE, api_key="sk-test"))

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["api_key"] == "sk-test"
    assert call["model"] == "gpt-4o"
    assert call["max_tokens"] == 1000
    assert call["image_url"] == IMAGE
    assert call["system_prompt"] == SYSTEM_PROMPT
    assert call["user_prompt"] == USER_PROMPT
    assert "Return ONLY the JSON object, no additional text" in SYSTEM_PROMPT


def test_analyze_requires_api_key() -> None:
    client = FakeChatClient()

    with pytest.raises(ValidationError, match="API key"):
        asyncio.run(_service(client).analyze(image=IMAGE, api_key=""))

    assert client.calls == []


def test_analyze_requires_image() -> None:
    client = FakeChatClient()

    with pytest.raises(ValidationError, match="Image"):
        asyncio.run(_service(client).analyze(image=None, api_key="sk-test"))

    assert client.calls == []


def test_analyze_checks_key_before_image() -> None:
    with pytest.raises(ValidationError, match="API key"):
        asyncio.run(_service(FakeChatClient()).analyze(image=None, api_key=None))


def test_analyze_rejects_empty_reply() -> None:
    client = FakeChatClient(reply="")

    with pytest.raises(UpstreamFormatError, match="No response"):
        asyncio.run(_service(client).analyze(image=IMAGE, api_key="sk-test"))


def test_analyze_propagates_upstream_error() -> None:
    client = FakeChatClient(error=UpstreamError("Incorrect API key provided"))

    with pytest.raises(UpstreamError, match="Incorrect API key"):
        asyncio.run(_service(client).analyze(image=IMAGE, api_key="sk-bad"))


def test_analyze_does_not_correct_total_protein() -> None:
    client = FakeChatClient(
        reply='{"foods":[{"name":"Tofu","quantity":"100g","protein":8}],'
        '"totalProtein":80}'
    )

    result = asyncio.run(_service(client).analyze(image=IMAGE, api_key="sk-test"))

    assert result["totalProtein"] == 80


def test_extract_ignores_surrounding_prose() -> None:
    text = (
        'Sure! {"foods":[{"name":"Egg","quantity":"50g","protein":6}],'
        '"totalProtein":6} Enjoy!'
    )

    assert extract_json_object(text) == {
        "foods": [{"name": "Egg", "quantity": "50g", "protein": 6}],
        "totalProtein": 6,
    }


def test_extract_handles_code_fences() -> None:
    text = '```json\n{"foods": [], "totalProtein": 0}\n```'

    assert extract_json_object(text) == {"foods": [], "totalProtein": 0}


def test_extract_without_braces_is_format_error() -> None:
    with pytest.raises(UpstreamFormatError):
        extract_json_object("I could not identify any food in this photo.")


def test_extract_invalid_json_is_format_error() -> None:
    with pytest.raises(UpstreamFormatError, match="Invalid JSON"):
        extract_json_object("Here: {foods: [Egg]}")


def test_extract_spans_first_to_last_brace() -> None:
    text = 'First {"a": 1} then {"b": 2}'

    with pytest.raises(UpstreamFormatError):
        extract_json_object(text)
