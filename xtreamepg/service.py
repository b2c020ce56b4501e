"""
Service wiring for XtreamEPG.

AddonService owns every long-lived component: the EPG service and its
store, the provider client, the addon handlers and the background
scheduler. The FastAPI app holds one instance on app.state.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from xtreamepg.addon.handlers import AddonHandlers
from xtreamepg.config import XtreamEPGConfig
from xtreamepg.epg.service import EPGService
from xtreamepg.epg.store import EPGStore
from xtreamepg.provider.xtream import XtreamClient
from xtreamepg.tasks.epg_tasks import EPG_REFRESH_TASK, refresh_epg_task
from xtreamepg.tasks.scheduler import TaskScheduler

logger = logging.getLogger(__name__)


class AddonService:
    """Process-scoped container for the addon's components."""

    def __init__(
        self,
        config: XtreamEPGConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        scheduler: Optional[TaskScheduler] = None,
    ):
        self.config = config
        self.epg = EPGService(
            config.epg,
            store=EPGStore(),
            http_client=http_client,
            timeout=config.provider.request_timeout,
        )
        self.provider = XtreamClient(config.provider, http_client=http_client)
        self.handlers = AddonHandlers(config.addon, self.provider, epg=self.epg)
        self.scheduler = scheduler or TaskScheduler()

    async def start(self) -> None:
        """Schedule the EPG refresh (now, then every interval) and start."""
        self.scheduler.add_task(
            EPG_REFRESH_TASK,
            refresh_epg_task,
            self.config.epg.refresh_interval,
            True,
            self.epg,
        )
        await self.scheduler.start()

        if not self.epg.enabled:
            logger.info("EPG disabled; meta responses will carry no programme info")

    async def stop(self) -> None:
        await self.scheduler.stop()

    def get_status(self) -> Dict[str, Any]:
        return {
            "epg": {
                "enabled": self.epg.enabled,
                "last_error": self.epg.last_error,
                **self.epg.store.get_stats(),
            },
            "tasks": self.scheduler.get_tasks(),
        }
