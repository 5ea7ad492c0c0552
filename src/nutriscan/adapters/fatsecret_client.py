"""FatSecret Platform API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class FatSecretClient(Protocol):
    """Interface for FatSecret Platform API interactions."""

    async def fetch_token(self) -> str:
        """Obtain an OAuth2 client-credentials access token."""

    async def search_foods(self, token: str, query: str) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, token: str, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings and return raw API data."""


@dataclass
class HttpxFatSecretClient(FatSecretClient):
    """HTTPX-backed FatSecret client."""

    client_id: str
    client_secret: str
    token_url: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        client_id: str,
        client_secret: str,
        token_url: str,
        base_url: str,
        timeout_seconds: float = 10.0,
    ) -> "HttpxFatSecretClient":
        """Create a FatSecret client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            token_url=token_url,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def fetch_token(self) -> str:
        """Exchange client credentials for a bearer token."""
        response = await self.http_client.post(
            self.token_url,
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials", "scope": "basic"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return str(response.json()["access_token"])

    async def search_foods(self, token: str, query: str) -> dict[str, object]:
        """Search foods by query."""
        response = await self.http_client.get(
            f"{self.base_url}/foods/search/v1",
            params={"search_expression": query, "format": "json"},
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, token: str, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings."""
        response = await self.http_client.get(
            f"{self.base_url}/food/v4",
            params={"food_id": food_id, "format": "json"},
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
