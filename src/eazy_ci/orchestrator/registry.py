"""Session-owned record of started containers and routable links."""

from __future__ import annotations

import threading


class LiveResourceRegistry:
    """Ordered sets of container ids and link endpoints.

    Both sets only grow while the pipeline runs. ``drain`` hands every
    container id out exactly once; ids registered after a drain are handed
    out by the next drain.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._container_ids: dict[str, None] = {}
        self._links: dict[str, None] = {}
        self._drained: set[str] = set()

    def register_container(self, container_id: str) -> bool:
        """Record ``container_id``; returns False if it was already known."""
        if not container_id:
            raise ValueError("container_id must be a non-empty string")
        with self._lock:
            if container_id in self._container_ids or container_id in self._drained:
                return False
            self._container_ids[container_id] = None
            return True

    def add_link(self, link: str) -> None:
        with self._lock:
            self._links.setdefault(link, None)

    def container_ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._container_ids)

    def links(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._links)

    def drain(self) -> list[str]:
        """Remove and return every registered container id, in start order."""
        with self._lock:
            drained = list(self._container_ids)
            self._drained.update(drained)
            self._container_ids.clear()
            return drained

    def __contains__(self, container_id: object) -> bool:
        with self._lock:
            return container_id in self._container_ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._container_ids)
