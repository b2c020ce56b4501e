"""
Xtream Codes provider client.

Wraps the provider's player_api.php endpoint and builds direct live
stream URLs from stream ids.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from xtreamepg.config import ProviderConfig

logger = logging.getLogger(__name__)


class ProviderResponseError(Exception):
    """Raised when the provider answers with an unexpected payload."""


@dataclass
class LiveStream:
    """A live channel record from get_live_streams."""

    stream_id: str
    name: Optional[str] = None
    stream_icon: Optional[str] = None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "LiveStream":
        stream_id = record.get("stream_id")
        return cls(
            stream_id="" if stream_id is None else str(stream_id),
            name=record.get("name") or None,
            stream_icon=record.get("stream_icon") or None,
        )


class XtreamClient:
    """Client for an Xtream Codes panel."""

    def __init__(
        self,
        config: ProviderConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self._http_client = http_client

    def build_api_url(self, **params: Any) -> str:
        """Build a player API URL carrying the account credentials."""
        query_params = {
            "username": self.config.username,
            "password": self.config.password,
            **params,
        }
        query = urlencode({k: v for k, v in query_params.items() if v})
        return f"{self.config.base_url}/player_api.php?{query}"

    def build_stream_url(self, stream_id: str) -> str:
        """Build the direct playback URL for a live stream."""
        return (
            f"{self.config.base_url}/live/"
            f"{self.config.username}/{self.config.password}/{stream_id}.ts"
        )

    async def get_live_streams(self) -> List[LiveStream]:
        """
        Fetch the live channel list.

        Raises:
            httpx.HTTPError: On transport failure or non-success status
            ValueError: If the body is not valid JSON
            ProviderResponseError: If the body is not a JSON array
        """
        url = self.build_api_url(action="get_live_streams")
        data = await self._get_json(url)

        if not isinstance(data, list):
            raise ProviderResponseError("Invalid response format from IPTV server")

        return [LiveStream.from_api(item) for item in data if isinstance(item, dict)]

    async def _get_json(self, url: str) -> Any:
        if self._http_client is not None:
            response = await self._http_client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient(
            timeout=self.config.request_timeout, follow_redirects=True
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()
