"""An ordered collection of known peers."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterator

from punchchat.endpoint import Endpoint


@dataclass
class PeerEntry:
    """A peer and the time (seconds since the epoch) it was first recorded."""

    endpoint: Endpoint
    last_seen: int


class PeerList:
    """Endpoints kept in insertion order, each at most once."""

    def __init__(self) -> None:
        self._entries: dict[Endpoint, PeerEntry] = {}

    def add(self, endpoint: Endpoint) -> bool:
        """Add ``endpoint``; return False if it was already present."""
        if endpoint in self._entries:
            return False
        self._entries[endpoint] = PeerEntry(endpoint, int(time.time()))
        return True

    def remove(self, endpoint: Endpoint) -> bool:
        """Remove ``endpoint``; return False if it was not present."""
        return self._entries.pop(endpoint, None) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PeerEntry]:
        return iter(list(self._entries.values()))

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._entries

    def dump(self) -> str:
        """Return the list as ``a(t)->b(t);`` plus a newline, or '' when empty."""
        if not self._entries:
            return ""
        body = "->".join(f"{e.endpoint}({e.last_seen})" for e in self._entries.values())
        return body + ";\n"