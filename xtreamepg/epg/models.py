"""EPG data models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

UNKNOWN_TITLE = "Unknown"


@dataclass(frozen=True)
class ProgrammeEntry:
    """A single programme on a channel's schedule.

    start/stop are timezone-aware UTC datetimes, or None when the feed
    carried a value that could not be parsed.
    """

    title: str
    start: Optional[datetime]
    stop: Optional[datetime]

    @property
    def is_valid(self) -> bool:
        """Whether the entry can answer a point-in-time lookup."""
        return self.start is not None and self.stop is not None and self.start <= self.stop

    def is_airing(self, now: datetime) -> bool:
        """Whether now falls within [start, stop] inclusive."""
        if not self.is_valid:
            return False
        return self.start <= now <= self.stop

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start": self.start.isoformat() if self.start else None,
            "stop": self.stop.isoformat() if self.stop else None,
        }


# channel id -> entries in document order
EpgIndex = Dict[str, List[ProgrammeEntry]]


@dataclass
class RefreshStats:
    """Bookkeeping for one EPG refresh."""

    programmes_seen: int = 0
    programmes_kept: int = 0
    missing_channel: int = 0
    outside_window: int = 0
    over_channel_limit: int = 0
    channel_count: int = 0
    refreshed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "programmes_seen": self.programmes_seen,
            "programmes_kept": self.programmes_kept,
            "missing_channel": self.missing_channel,
            "outside_window": self.outside_window,
            "over_channel_limit": self.over_channel_limit,
            "channel_count": self.channel_count,
            "refreshed_at": self.refreshed_at.isoformat(),
        }
