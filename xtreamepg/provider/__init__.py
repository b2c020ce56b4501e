"""IPTV provider clients"""

from xtreamepg.provider.xtream import LiveStream, ProviderResponseError, XtreamClient

__all__ = [
    "LiveStream",
    "ProviderResponseError",
    "XtreamClient",
]
