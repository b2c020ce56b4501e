"""
In-memory EPG index holder.

The index is replaced wholesale on every successful refresh and never
mutated in place, so readers on the event loop see either the previous
or the new index in full.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from xtreamepg.epg.models import EpgIndex, ProgrammeEntry, RefreshStats

logger = logging.getLogger(__name__)


def find_current_programme(
    index: EpgIndex, channel_id: str, now: Optional[datetime] = None
) -> Optional[ProgrammeEntry]:
    """
    Return the first programme on channel_id airing at now.

    Entries are scanned in document order; when entries overlap the
    earliest-listed one wins. Entries with invalid timestamps never match.
    """
    entries = index.get(channel_id)
    if not entries:
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    for entry in entries:
        if entry.is_airing(now):
            return entry
    return None


class EPGStore:
    """Process-scoped handle on the current EPG index."""

    def __init__(self) -> None:
        self._index: EpgIndex = {}
        self._last_refresh: Optional[RefreshStats] = None

    @property
    def index(self) -> EpgIndex:
        return self._index

    @property
    def last_refresh(self) -> Optional[RefreshStats]:
        return self._last_refresh

    @property
    def channel_count(self) -> int:
        return len(self._index)

    def replace(self, index: EpgIndex, stats: Optional[RefreshStats] = None) -> None:
        """Swap in a freshly built index."""
        self._index = index
        self._last_refresh = stats

    def clear(self) -> None:
        self.replace({})

    def programmes(self, channel_id: str) -> List[ProgrammeEntry]:
        return list(self._index.get(channel_id, []))

    def current_programme(
        self, channel_id: str, now: Optional[datetime] = None
    ) -> Optional[ProgrammeEntry]:
        """Look up what is airing on channel_id at now."""
        # Bind once so a concurrent replace() cannot swap the index mid-scan
        index = self._index
        return find_current_programme(index, channel_id, now)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "channel_count": self.channel_count,
            "programme_count": sum(len(entries) for entries in self._index.values()),
            "last_refresh": self._last_refresh.to_dict() if self._last_refresh else None,
        }
