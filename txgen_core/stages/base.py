"""
Base stage infrastructure for the generation pipeline.

Provides StageContext (shared state) and BaseStage (record hand-off and
progress helpers) used by all entity stages.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..ids import IdAllocator
from ..values import ValueProvider

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class StageContext:
    """Shared context passed to all generation stages.

    Contains everything a stage needs to build and emit records.
    """

    allocator: IdAllocator
    values: ValueProvider
    rng: random.Random
    run_id: str
    logger: logging.Logger
    progress: Optional[ProgressCallback] = None
    skewed: bool = False
    address_ids: bool = True
    min_amount: float = 1.0
    max_amount: float = 1000.0


class BaseStage:
    """Base class for entity stages.

    Subclasses set ``phase`` (progress/log name) and ``kind`` (entity kind
    used for id allocation) and implement ``run``.
    """

    phase = ""
    kind = ""

    def __init__(self, ctx: StageContext):
        self.ctx = ctx
        self.allocator = ctx.allocator
        self.values = ctx.values
        self.rng = ctx.rng
        self.run_id = ctx.run_id
        self.logger = ctx.logger

    def _emit(self, sink, record: Dict[str, Any], count: int, total: int) -> None:
        """Write one record and report progress."""
        sink.write(record)
        self._report(count, total)

    def _report(self, count: int, total: int) -> None:
        if self.ctx.progress is not None:
            self.ctx.progress(self.phase, count, total)

    def _require(self, ids: List[int], what: str) -> None:
        """Fail fast when a foreign-key source list is empty."""
        if not ids:
            raise RuntimeError(f"{self.phase} stage requires at least one {what}")
