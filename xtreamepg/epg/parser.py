"""
XMLTV EPG parser.

Turns an XMLTV document into an EpgIndex: programme entries grouped by
channel id in document order, limited to a near-term window and capped
per channel.
"""

import gzip
import logging
import re
import xml.etree.ElementTree as ET
import zlib
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from xtreamepg.epg.models import UNKNOWN_TITLE, EpgIndex, ProgrammeEntry, RefreshStats

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"

# yyyyMMddHHmm[ss] [+HHMM]
_XMLTV_TIME = re.compile(
    r"^(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})?\s*(?:([+-])(\d{2}):?(\d{2})|Z|UTC|GMT)?$"
)


def parse_xmltv_time(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an XMLTV timestamp to an aware UTC datetime.

    Format: yyyyMMddHHmmss +HHMM, e.g. "20240101200000 +0100". Seconds and
    the offset are optional; a missing offset means UTC.

    Returns:
        The UTC datetime, or None if the value is missing or malformed.
    """
    if not value:
        return None

    match = _XMLTV_TIME.match(value.strip())
    if not match:
        return None

    year, month, day, hour, minute, second, sign, off_h, off_m = match.groups()
    try:
        offset = timedelta(0)
        if sign:
            offset = timedelta(hours=int(off_h), minutes=int(off_m))
            if sign == "-":
                offset = -offset
        dt = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second or 0),
            tzinfo=timezone(offset),
        )
    except ValueError:
        return None

    return dt.astimezone(timezone.utc)


def decompress_feed(content: bytes) -> bytes:
    """
    Gunzip the feed body if it carries the gzip magic bytes.

    Raises:
        ValueError: If the body looks gzipped but cannot be inflated
    """
    if content[:2] != GZIP_MAGIC:
        return content

    try:
        return gzip.decompress(content)
    except (OSError, EOFError, zlib.error) as e:
        raise ValueError(f"Corrupt gzip feed: {e}") from e


class XMLTVParser:
    """
    Builds an EpgIndex from XMLTV content.

    Programmes without a channel attribute are dropped. Programmes whose
    start is unparseable or falls outside [now, now + window] are dropped.
    Each channel keeps at most max_per_channel programmes, first come first
    kept. Entries with an unparseable stop (or stop before start) are kept
    but are not eligible for lookups.
    """

    def __init__(self, window: timedelta = timedelta(hours=24), max_per_channel: int = 10):
        self.window = window
        self.max_per_channel = max_per_channel

    def parse(
        self, content: bytes | str, now: Optional[datetime] = None
    ) -> Tuple[EpgIndex, RefreshStats]:
        """
        Parse an XMLTV document.

        Args:
            content: XMLTV document (raw bytes or text)
            now: Reference time for the window filter (defaults to utcnow)

        Returns:
            (index, stats) for the parsed document

        Raises:
            ET.ParseError: If the document is not well-formed XML
        """
        now = _as_utc(now or datetime.now(timezone.utc))
        window_end = now + self.window

        root = ET.fromstring(content)

        index: EpgIndex = {}
        stats = RefreshStats(refreshed_at=now)

        for programme in root.iter("programme"):
            stats.programmes_seen += 1

            channel_id = (programme.get("channel") or "").strip()
            if not channel_id:
                stats.missing_channel += 1
                continue

            start = parse_xmltv_time(programme.get("start"))
            if start is None or not (now <= start <= window_end):
                stats.outside_window += 1
                continue

            entries = index.setdefault(channel_id, [])
            if len(entries) >= self.max_per_channel:
                stats.over_channel_limit += 1
                continue

            stop = parse_xmltv_time(programme.get("stop"))
            entries.append(
                ProgrammeEntry(
                    title=self._title(programme),
                    start=start,
                    stop=stop,
                )
            )
            stats.programmes_kept += 1

        stats.channel_count = len(index)
        return index, stats

    @staticmethod
    def _title(programme: ET.Element) -> str:
        title = programme.find("title")
        if title is None or not title.text or not title.text.strip():
            return UNKNOWN_TITLE
        return title.text.strip()


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
