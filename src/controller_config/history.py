from __future__ import annotations

import datetime
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: datetime.datetime
    namespace: str
    name: str
    resource_version: Optional[str]
    keys: Tuple[str, ...]


class History:
    """Thread-safe in-memory record of snapshot replacements.

    Only metadata is kept, never values, so secrets placed in the config map
    do not linger here. Oldest entries are dropped past ``max_entries``.
    """

    def __init__(self, max_entries: Optional[int] = 50) -> None:
        self._lock = threading.RLock()
        self._entries: List[HistoryEntry] = []
        self._max_entries = max_entries

    def add_entry(
        self,
        namespace: str,
        name: str,
        resource_version: Optional[str],
        keys: Tuple[str, ...],
    ) -> HistoryEntry:
        entry = HistoryEntry(
            timestamp=datetime.datetime.now(tz=datetime.timezone.utc),
            namespace=namespace,
            name=name,
            resource_version=resource_version,
            keys=tuple(sorted(keys)),
        )
        with self._lock:
            self._entries.append(entry)
            if self._max_entries is not None and len(self._entries) > self._max_entries:
                del self._entries[0 : len(self._entries) - self._max_entries]
        return entry

    def all_entries(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def last_entry(self) -> Optional[HistoryEntry]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def formatted_entries(self) -> List[Dict[str, Any]]:
        """Return entries as plain dicts with ISO timestamps."""
        with self._lock:
            return [
                {
                    "timestamp": e.timestamp.isoformat(),
                    "namespace": e.namespace,
                    "name": e.name,
                    "resource_version": e.resource_version,
                    "keys": list(e.keys),
                }
                for e in self._entries
            ]
