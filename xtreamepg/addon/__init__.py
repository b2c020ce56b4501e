"""Addon protocol layer: manifest and resource handlers"""

from xtreamepg.addon.handlers import AddonHandlers
from xtreamepg.addon.manifest import build_manifest, has_catalog

__all__ = [
    "AddonHandlers",
    "build_manifest",
    "has_catalog",
]
