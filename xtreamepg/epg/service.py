"""
EPG refresh service.

Fetches the configured XMLTV feed, parses it and swaps the result into
the EPGStore. A failed refresh leaves the previous index in place.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta
from typing import Optional, Tuple

import httpx

from xtreamepg.config import EPGConfig
from xtreamepg.epg.models import EpgIndex, ProgrammeEntry, RefreshStats
from xtreamepg.epg.parser import XMLTVParser, decompress_feed
from xtreamepg.epg.store import EPGStore
from xtreamepg.results import OperationResult

logger = logging.getLogger(__name__)


class EPGService:
    """
    Owns the EPG store and keeps it fresh.

    Args:
        config: EPG settings (feed URL, window, per-channel cap)
        store: Store to publish into; a new one is created if omitted
        http_client: Client to fetch with; a short-lived client is
            created per refresh if omitted
        timeout: Request timeout in seconds, None to wait indefinitely
    """

    def __init__(
        self,
        config: EPGConfig,
        store: Optional[EPGStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.config = config
        self.store = store or EPGStore()
        self._http_client = http_client
        self._timeout = timeout
        self.parser = XMLTVParser(
            window=timedelta(hours=config.window_hours),
            max_per_channel=config.max_programmes_per_channel,
        )
        self.last_error: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def refresh(self, now: Optional[datetime] = None) -> OperationResult[Optional[RefreshStats]]:
        """
        Rebuild the EPG index from the feed.

        Returns:
            OK with refresh stats, SKIPPED when no feed is configured, or
            DEGRADED when the fetch or parse failed. The store is only
            touched on OK.
        """
        if not self.enabled:
            logger.warning("EPG_URL not provided; skipping EPG loading")
            return OperationResult.skipped(None, "EPG feed URL not configured")

        url = self.config.url.strip()

        try:
            content = await self._fetch(url)
        except httpx.HTTPError as e:
            return self._failed(f"Failed to load EPG: {e}")

        try:
            index, stats = await asyncio.to_thread(self._parse, content, now)
        except (ET.ParseError, ValueError) as e:
            return self._failed(f"Failed to parse EPG: {e}")

        self.store.replace(index, stats)
        self.last_error = None

        logger.info(
            f"EPG refreshed: {stats.channel_count} channels, "
            f"{stats.programmes_kept}/{stats.programmes_seen} programmes kept "
            f"(outside window: {stats.outside_window}, "
            f"over channel limit: {stats.over_channel_limit}, "
            f"missing channel: {stats.missing_channel})"
        )
        return OperationResult.success(stats)

    def _parse(
        self, content: bytes, now: Optional[datetime]
    ) -> Tuple[EpgIndex, RefreshStats]:
        # Called via asyncio.to_thread, never on the event loop
        return self.parser.parse(decompress_feed(content), now=now)

    def current_programme(
        self, channel_id: str, now: Optional[datetime] = None
    ) -> Optional[ProgrammeEntry]:
        return self.store.current_programme(channel_id, now)

    async def _fetch(self, url: str) -> bytes:
        if self._http_client is not None:
            response = await self._http_client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.content

        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content

    def _failed(self, message: str) -> OperationResult[Optional[RefreshStats]]:
        logger.error(message)
        self.last_error = message
        return OperationResult.degraded(None, message)
