"""
Catalog, stream and meta handlers.

Each handler returns an OperationResult whose value is the response body
to serve. Provider or EPG failures degrade the body (empty catalog, no
stream, no description) instead of raising.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from xtreamepg.config import AddonConfig
from xtreamepg.epg.service import EPGService
from xtreamepg.provider.xtream import LiveStream, ProviderResponseError, XtreamClient
from xtreamepg.results import OperationResult

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "Unknown Channel"
DEFAULT_META_NAME = "IPTV Channel"
STREAM_TITLE = "IPTV Stream"


class AddonHandlers:
    """Translates addon requests into provider and EPG lookups."""

    def __init__(
        self,
        config: AddonConfig,
        provider: XtreamClient,
        epg: Optional[EPGService] = None,
    ):
        self.config = config
        self.provider = provider
        self.epg = epg

    def strip_prefix(self, addon_id: str) -> str:
        """Recover the provider stream id from an addon-scoped id."""
        return addon_id.removeprefix(self.config.id_prefix)

    def to_meta_preview(self, stream: LiveStream) -> Dict[str, Any]:
        return {
            "id": f"{self.config.id_prefix}{stream.stream_id}",
            "type": self.config.content_type,
            "name": stream.name or DEFAULT_CHANNEL_NAME,
            "poster": stream.stream_icon,
        }

    async def catalog(self) -> OperationResult[Dict[str, Any]]:
        """List live channels as catalog entries."""
        try:
            streams = await self.provider.get_live_streams()
        except (httpx.HTTPError, ValueError, ProviderResponseError) as e:
            logger.error(f"Catalog error: {e}")
            return OperationResult.degraded({"metas": []}, e)

        metas = [self.to_meta_preview(stream) for stream in streams]
        logger.debug(f"Catalog built with {len(metas)} channels")
        return OperationResult.success({"metas": metas})

    def stream(self, addon_id: str) -> OperationResult[Dict[str, Any]]:
        """Resolve an addon id to its single live stream."""
        stream_id = self.strip_prefix(addon_id)
        if not stream_id:
            logger.error(f"Stream error: Invalid stream ID '{addon_id}'")
            return OperationResult.degraded({"streams": []}, "Invalid stream ID")

        url = self.provider.build_stream_url(stream_id)
        return OperationResult.success(
            {"streams": [{"title": STREAM_TITLE, "url": url}]}
        )

    def meta(
        self, addon_id: str, now: Optional[datetime] = None
    ) -> OperationResult[Dict[str, Any]]:
        """Describe a channel, with what is airing now when the EPG knows."""
        meta: Dict[str, Any] = {
            "id": addon_id,
            "type": self.config.content_type,
            "name": DEFAULT_META_NAME,
        }

        if self.epg is not None:
            show = self.epg.current_programme(self.strip_prefix(addon_id), now)
            if show is not None:
                meta["description"] = f"Now Playing: {show.title}"

        return OperationResult.success({"meta": meta})
