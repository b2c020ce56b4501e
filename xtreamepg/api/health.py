"""Health check endpoints for XtreamEPG"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

from xtreamepg import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Health check with EPG and scheduler status.

    The service reports healthy while the EPG is stale or disabled; those
    only degrade metadata.
    """
    service = getattr(request.app.state, "service", None)

    body: dict[str, Any] = {
        "status": "healthy" if service is not None else "starting",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if service is not None:
        body.update(service.get_status())
    return body


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
