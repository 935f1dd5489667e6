"""API client for the creatorkit tools API."""

import logging
from typing import Any

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """The API could not be reached or answered with an error."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class ToolsAPIClient:
    """Client for listing and running creatorkit tools."""

    def __init__(self, config: CLIConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def list_tools(self) -> list[dict[str, Any]]:
        return await self._request("GET", self.config.tools_url)

    async def run_tool(self, name: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", self.config.tool_url(name), json=payload)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        logger.debug("%s %s %s", method, url, kwargs.get("json", ""))
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise APIError("Request timed out.", "TIMEOUT") from e
        except httpx.TransportError as e:
            raise APIError(f"Connection error: {e}", "CONNECTION_ERROR") from e

        logger.debug("Response status: %s", response.status_code)
        if response.status_code != 200:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise APIError(
                str(body.get("detail") or f"HTTP {response.status_code}: {response.text}"),
                str(body.get("code") or "HTTP_ERROR"),
            )
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
