"""Addon manifest declaration"""

from typing import Any, Dict

from xtreamepg.config import AddonConfig

RESOURCES = ["catalog", "stream", "meta"]


def build_manifest(config: AddonConfig) -> Dict[str, Any]:
    """Build the manifest advertised at /manifest.json."""
    return {
        "id": config.id,
        "version": config.version,
        "name": config.name,
        "description": config.description,
        "catalogs": [
            {
                "type": config.content_type,
                "id": config.catalog_id,
                "name": config.catalog_name,
            }
        ],
        "resources": list(RESOURCES),
        "types": [config.content_type],
        # Prefix matching is by string start, so "iptv" covers "iptv_123"
        "idPrefixes": [config.id_prefix.rstrip("_")],
    }


def has_catalog(config: AddonConfig, content_type: str, catalog_id: str) -> bool:
    return content_type == config.content_type and catalog_id == config.catalog_id
