"""
EPG refresh background task.

Reloads the XMLTV feed into the EPG store on the scheduler's interval.
"""

import logging
from typing import Any

from xtreamepg.epg.service import EPGService

logger = logging.getLogger(__name__)

EPG_REFRESH_TASK = "epg_refresh"


async def refresh_epg_task(service: EPGService) -> dict[str, Any]:
    """
    Refresh the EPG index.

    Returns:
        Summary of the refresh: status, error and the store's stats
    """
    result = await service.refresh()

    return {
        "status": result.status.value,
        "error": result.error,
        **service.store.get_stats(),
    }
