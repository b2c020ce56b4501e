"""EPG ingestion and now-playing lookup"""

from xtreamepg.epg.models import EpgIndex, ProgrammeEntry, RefreshStats
from xtreamepg.epg.parser import XMLTVParser, parse_xmltv_time
from xtreamepg.epg.service import EPGService
from xtreamepg.epg.store import EPGStore, find_current_programme

__all__ = [
    "EPGService",
    "EPGStore",
    "EpgIndex",
    "ProgrammeEntry",
    "RefreshStats",
    "XMLTVParser",
    "find_current_programme",
    "parse_xmltv_time",
]
