"""HTTP client for the meal analysis gateway."""

from dataclasses import dataclass

import httpx

from protein_tracker.domain.errors import GatewayRequestError
from protein_tracker.services.tracker import GatewayClient

ANALYZE_PATH = "/api/analyze"
FALLBACK_ERROR = "Failed to analyze image"


@dataclass
class HttpxGatewayClient(GatewayClient):
    """HTTPX-backed gateway client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxGatewayClient":
        """Create a gateway client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def analyze(self, image_data_url: str, api_key: str) -> dict[str, object]:
        """Post an image to the gateway and return its JSON result."""
        url = f"{self.base_url.rstrip('/')}{ANALYZE_PATH}"
        try:
            response = await self.http_client.post(
                url, json={"image": image_data_url, "apiKey": api_key}
            )
        except httpx.HTTPError as exc:
            raise GatewayRequestError(str(exc) or FALLBACK_ERROR) from exc

        if response.is_error:
            raise GatewayRequestError(
                _error_message(response), status_code=response.status_code
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise GatewayRequestError(FALLBACK_ERROR) from exc
        if not isinstance(data, dict):
            raise GatewayRequestError(FALLBACK_ERROR)
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FALLBACK_ERROR
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return FALLBACK_ERROR
