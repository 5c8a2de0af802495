"""Bounded FIFO cache of rendered article bodies."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from preview_app.constants.preview_constants import RENDER_CACHE_CAPACITY

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheStats:
    """Immutable snapshot returned to consumers."""

    hits: int
    misses: int
    size: int
    capacity: int


class RenderCache:
    """Maps front-matter-stripped source text to rendered markup.

    Eviction is by insertion order only: a hit does not move the entry, so the
    oldest-inserted entry is always the next one dropped.
    """

    def __init__(self, capacity: int = RENDER_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")
        self._capacity = capacity
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: str, compute: Callable[[str], str]) -> str:
        """Return the cached value for ``key`` or compute, store and return it.

        Nothing is stored when ``compute`` raises.
        """
        cached = self._entries.get(key)
        if cached is not None:
            self._hits += 1
            logger.debug("Render cache hit (%d entries)", len(self._entries))
            return cached

        self._misses += 1
        value = compute(key)
        self._entries[key] = value
        if len(self._entries) > self._capacity:
            self._entries.popitem(last=False)
        return value

    def clear(self) -> None:
        if self._entries:
            logger.debug("Clearing render cache (%d entries)", len(self._entries))
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries)

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._entries),
            capacity=self._capacity,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
