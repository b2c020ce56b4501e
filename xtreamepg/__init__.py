"""
XtreamEPG - IPTV Addon Service

Exposes an Xtream Codes IPTV provider as a media-addon catalog:
- Live channel catalog from the provider API
- Direct stream URL resolution
- Optional "Now Playing" metadata from an XMLTV EPG feed
"""

__version__ = "1.1.0"
__author__ = "XtreamEPG Contributors"
__license__ = "MIT"

from xtreamepg.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
