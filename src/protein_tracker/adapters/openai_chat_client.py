"""OpenAI Chat Completions client for meal photo analysis."""

from collections.abc import Callable
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from protein_tracker.domain.errors import UpstreamError
from protein_tracker.services.analysis import ChatCompletionClient


@dataclass
class OpenAIChatClient(ChatCompletionClient):
    """Chat client that builds a fresh OpenAI client per caller credential."""

    client_factory: Callable[[str], AsyncOpenAI]

    @classmethod
    def create(cls, base_url: str | None = None) -> "OpenAIChatClient":
        """Create a chat client targeting the default or a custom API base."""

        def factory(api_key: str) -> AsyncOpenAI:
            return AsyncOpenAI(api_key=api_key, base_url=base_url)

        return cls(client_factory=factory)

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
        """Send one chat completion request with the image attached inline."""
        client = self.client_factory(api_key)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            raise UpstreamError(str(exc)) from exc
        finally:
            await client.close()

        if not response.choices:
            return None
        return response.choices[0].message.content
