"""Addon protocol endpoints: manifest, catalog, stream and meta"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from xtreamepg.addon.manifest import build_manifest, has_catalog
from xtreamepg.service import AddonService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Addon"])


def get_service(request: Request) -> AddonService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not started")
    return service


@router.get("/manifest.json")
async def get_manifest(request: Request) -> dict[str, Any]:
    service = get_service(request)
    return build_manifest(service.config.addon)


@router.get("/catalog/{type}/{id}.json")
@router.get("/catalog/{type}/{id}/{extra}.json")
async def get_catalog(
    request: Request, type: str, id: str, extra: str | None = None
) -> dict[str, Any]:
    """
    List live channels.

    Extra arguments (search, skip, genre) are accepted but not applied.
    """
    service = get_service(request)
    if not has_catalog(service.config.addon, type, id):
        raise HTTPException(status_code=404, detail=f"Catalog not found: {type}/{id}")

    result = await service.handlers.catalog()
    return result.value


@router.get("/stream/{type}/{id}.json")
async def get_stream(request: Request, type: str, id: str) -> dict[str, Any]:
    service = get_service(request)
    result = service.handlers.stream(id)
    return result.value


@router.get("/meta/{type}/{id}.json")
async def get_meta(request: Request, type: str, id: str) -> dict[str, Any]:
    service = get_service(request)
    result = service.handlers.meta(id)
    return result.value
