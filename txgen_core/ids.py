"""
Identifier allocation for generated entities.

Two modes are supported:
- shared: one sequence for every entity kind, so ids are unique across the
  whole dataset
- per-kind: an independent sequence for each entity kind, each with its own
  starting value

An allocator is built fresh for each run; mode and starting values never
change after construction.
"""

import itertools
from typing import Dict, Iterator, Optional

from .models import ENTITY_KINDS

SHARED = "shared"
PER_KIND = "per-kind"

ID_MODES = (SHARED, PER_KIND)


class IdAllocator:
    """
    Hands out strictly increasing integer ids.

    Example:
        ids = IdAllocator(mode="shared", start_id=1000)
        ids.next("user")     # 1000
        ids.next("address")  # 1001

        ids = IdAllocator(mode="per-kind", start_ids={"user": 1, "transaction": 500})
        ids.next("user")         # 1
        ids.next("transaction")  # 500
    """

    def __init__(
        self,
        mode: str = SHARED,
        start_id: int = 1,
        start_ids: Optional[Dict[str, int]] = None,
    ):
        if mode not in ID_MODES:
            raise ValueError(f"Invalid id mode: '{mode}'. Must be one of: {', '.join(ID_MODES)}")
        start_ids = dict(start_ids or {})
        unknown = sorted(set(start_ids) - set(ENTITY_KINDS))
        if unknown:
            raise ValueError(f"Unknown entity kind(s) in start_ids: {', '.join(unknown)}")
        if mode == SHARED and start_ids:
            raise ValueError("Per-kind start ids are only valid with id mode 'per-kind'")

        self.mode = mode
        self._counters: Dict[str, Iterator[int]] = {}

        if mode == SHARED:
            shared = itertools.count(int(start_id))
            for kind in ENTITY_KINDS:
                self._counters[kind] = shared
        else:
            for kind in ENTITY_KINDS:
                self._counters[kind] = itertools.count(int(start_ids.get(kind, start_id)))

        self._start = {kind: int(start_ids.get(kind, start_id)) for kind in ENTITY_KINDS}
        self._issued: Dict[str, int] = {}

    def next(self, kind: str) -> int:
        """Return the next id for ``kind`` and advance its sequence."""
        counter = self._counter(kind)
        # next() on itertools.count is a single atomic read-then-increment
        value = next(counter)
        self._issued[self._scope(kind)] = value
        return value

    def peek(self, kind: str) -> int:
        """Return the id the next call to ``next(kind)`` would hand out."""
        self._counter(kind)
        scope = self._scope(kind)
        if scope in self._issued:
            return self._issued[scope] + 1
        return self._start[kind]

    def _counter(self, kind: str) -> Iterator[int]:
        try:
            return self._counters[kind]
        except KeyError:
            raise ValueError(
                f"Unknown entity kind: '{kind}'. Must be one of: {', '.join(ENTITY_KINDS)}"
            ) from None

    def _scope(self, kind: str) -> str:
        return SHARED if self.mode == SHARED else kind
