"""
Generation runner - orchestrates one dataset generation run.

Phases run strictly in dependency order, each implemented by a stage in
txgen_core.stages:
- users: UserStage, keeps user ids
- addresses: AddressStage, one address per user id
- providers: ProviderStage, keeps provider ids
- transactions: TransactionStage, references user and provider ids

All four sinks are opened before the first phase and closed once the run
ends. A failing phase aborts the run; files already written are left as
they are.
"""

import math
import os
import random
import time
import uuid
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .ids import ID_MODES, PER_KIND, SHARED, IdAllocator
from .logger_utils import get_logger
from .models import ADDRESS, ENTITY_KINDS, FILE_STEMS, PROVIDER, TRANSACTION, USER, field_names
from .sinks import SinkError, open_sink, sink_path, validate_format
from .stages.addresses import AddressStage
from .stages.base import ProgressCallback, StageContext
from .stages.providers import ProviderStage
from .stages.transactions import TransactionStage
from .stages.users import UserStage
from .values import VALUE_PROVIDERS, ValueProvider, build_value_provider, validate_locale

PHASES = ("users", "addresses", "providers", "transactions")

# Phases that must be complete before a phase may start
PHASE_REQUIRES = {
    "users": (),
    "addresses": ("users",),
    "providers": (),
    "transactions": ("users", "providers"),
}

PHASE_KINDS = {
    "users": USER,
    "addresses": ADDRESS,
    "providers": PROVIDER,
    "transactions": TRANSACTION,
}


@dataclass
class RunConfig:
    """Configuration for a generation run."""

    users: int = 100
    transactions: int = 1000
    providers: int = 10
    skewed: bool = False
    output_dir: str = "output"
    format: str = "json"
    id_mode: str = SHARED
    start_id: int = 1
    start_ids: Dict[str, int] = field(default_factory=dict)
    address_ids: bool = True
    seed: Optional[int] = None
    values: str = "faker"
    locale: Optional[str] = None
    min_amount: float = 1.0
    max_amount: float = 1000.0

    def __post_init__(self):
        self.format = str(self.format or "").lower()
        validate_format(self.format)

        mode = str(self.id_mode or "").lower().replace("_", "-")
        if mode not in ID_MODES:
            raise ValueError(f"Invalid id_mode: {self.id_mode}")
        self.id_mode = mode

        for name in ("users", "transactions", "providers"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.transactions > 0 and self.users == 0:
            raise ValueError("users must be >= 1 when transactions are requested")
        if self.transactions > 0 and self.providers == 0:
            raise ValueError("providers must be >= 1 when transactions are requested")

        unknown = sorted(set(self.start_ids) - set(ENTITY_KINDS))
        if unknown:
            raise ValueError(f"Unknown entity kind(s) in start_ids: {', '.join(unknown)}")
        if self.id_mode == SHARED and self.start_ids:
            raise ValueError("start_ids require id_mode 'per-kind'; use start_id in shared mode")

        if not (0 < self.min_amount < self.max_amount):
            raise ValueError(
                f"Amount range must satisfy 0 < min_amount < max_amount, "
                f"got ({self.min_amount}, {self.max_amount})"
            )
        if math.nextafter(self.min_amount, self.max_amount) >= self.max_amount:
            raise ValueError(
                f"Amount range ({self.min_amount}, {self.max_amount}) contains no value "
                f"strictly between its bounds"
            )
        if self.values not in VALUE_PROVIDERS:
            raise ValueError(f"Invalid values provider: {self.values}")
        if self.locale is not None:
            validate_locale(self.values, self.locale)

    def targets(self) -> Dict[str, int]:
        """Record count each phase is expected to produce."""
        return {
            "users": self.users,
            "addresses": self.users,
            "providers": self.providers,
            "transactions": self.transactions,
        }


@dataclass
class RunResult:
    """Result of a generation run."""

    run_id: str
    status: str
    output_dir: str
    format: str
    counts: Dict[str, int] = field(default_factory=dict)
    files: Dict[str, str] = field(default_factory=dict)
    duration_seconds: float = 0.0
    failed_phase: Optional[str] = None
    error: Optional[str] = None
    phases: List["PhaseMetric"] = field(default_factory=list)
    next_ids: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "SUCCESS"


@dataclass
class PhaseMetric:
    """Timing metric for a generation phase."""

    phase: str
    started_at: datetime
    target: int = 0
    ended_at: Optional[datetime] = None
    records: int = 0

    @property
    def duration_seconds(self) -> float:
        if self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return 0.0


class GenerationRunner:
    """
    Runs the four generation phases for one dataset.

    Example:
        from txgen_core import GenerationRunner, RunConfig

        runner = GenerationRunner(RunConfig(users=1000, transactions=50000, skewed=True))
        result = runner.run()
    """

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        values: Optional[ValueProvider] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        """
        Initialize runner.

        Args:
            config: Run configuration (defaults to RunConfig())
            values: Field value provider; built from config.values when omitted
            progress: Optional (phase, current, total) callback
        """
        self.config = config or RunConfig()
        self._values = values
        self.progress = progress
        self.run_id: Optional[str] = None
        self.completed: List[str] = []
        self._phase_metrics: List[PhaseMetric] = []
        self.logger = get_logger("GenerationRunner")

    def run(self) -> RunResult:
        """
        Execute all generation phases.

        Returns:
            RunResult with status, per-entity counts and output paths
        """
        config = self.config
        self.run_id = f"gen_{uuid.uuid4().hex[:12]}"
        self.completed = []
        self._phase_metrics = []
        start_time = time.monotonic()
        counts: Dict[str, int] = {}
        files = {
            FILE_STEMS[kind]: sink_path(config.output_dir, FILE_STEMS[kind], config.format)
            for kind in ENTITY_KINDS
        }
        current_phase: Optional[str] = None

        self.logger.info(
            f"Starting generation run ({config.format}, ids {config.id_mode})",
            extra={
                "run_id": self.run_id,
                "event": "run_start",
                "format": config.format,
                "seed": config.seed,
                "path": config.output_dir,
            },
        )

        try:
            current_phase = "setup"
            ctx = self._build_context()
            os.makedirs(config.output_dir, exist_ok=True)

            with ExitStack() as stack:
                sinks = {}
                for phase in PHASES:
                    kind = PHASE_KINDS[phase]
                    sinks[phase] = stack.enter_context(
                        open_sink(
                            config.output_dir,
                            FILE_STEMS[kind],
                            config.format,
                            field_names(kind, address_ids=config.address_ids),
                        )
                    )

                targets = config.targets()

                current_phase = "users"
                self._start_phase(current_phase, targets[current_phase])
                user_ids = UserStage(ctx).run(sinks[current_phase], config.users)
                counts[current_phase] = len(user_ids)
                self._end_phase(current_phase, len(user_ids))

                current_phase = "addresses"
                self._start_phase(current_phase, targets[current_phase])
                counts[current_phase] = AddressStage(ctx).run(sinks[current_phase], user_ids)
                self._end_phase(current_phase, counts[current_phase])

                current_phase = "providers"
                self._start_phase(current_phase, targets[current_phase])
                provider_ids = ProviderStage(ctx).run(sinks[current_phase], config.providers)
                counts[current_phase] = len(provider_ids)
                self._end_phase(current_phase, len(provider_ids))

                current_phase = "transactions"
                self._start_phase(current_phase, targets[current_phase])
                counts[current_phase] = TransactionStage(ctx).run(
                    sinks[current_phase], config.transactions, user_ids, provider_ids
                )
                self._end_phase(current_phase, counts[current_phase])

                # Closing flushes the files, so a flush failure still fails the run
                current_phase = "close"

            return self._complete_run(
                start_time,
                counts,
                files,
                status="SUCCESS",
                next_ids={kind: ctx.allocator.peek(kind) for kind in ENTITY_KINDS},
            )

        except Exception as e:
            error = f"{current_phase} phase failed: {e}"
            if isinstance(e, SinkError):
                error = f"{current_phase} phase failed writing {e.path}: {e}"
            self.logger.error(
                f"Generation run failed: {error}",
                exc_info=True,
                extra={
                    "run_id": self.run_id,
                    "event": "run_failed",
                    "phase": current_phase,
                    "path": getattr(e, "path", None),
                    "error": str(e),
                },
            )
            return self._complete_run(
                start_time,
                counts,
                files,
                status="FAILED",
                failed_phase=current_phase,
                error=error,
            )

    # ===== Setup =====

    def _build_context(self) -> StageContext:
        """Build a fresh allocator, RNG and value provider for this run."""
        config = self.config
        if config.id_mode == PER_KIND:
            allocator = IdAllocator(PER_KIND, config.start_id, config.start_ids)
        else:
            allocator = IdAllocator(SHARED, config.start_id)

        values = self._values
        if values is None:
            values = build_value_provider(config.values, config.locale, config.seed)

        return StageContext(
            allocator=allocator,
            values=values,
            rng=random.Random(config.seed),
            run_id=self.run_id,
            logger=self.logger,
            progress=self.progress,
            skewed=config.skewed,
            address_ids=config.address_ids,
            min_amount=config.min_amount,
            max_amount=config.max_amount,
        )

    # ===== Phase Tracking =====

    def _start_phase(self, phase: str, target: int) -> None:
        """Check prerequisites and record start of a phase."""
        missing = [p for p in PHASE_REQUIRES[phase] if p not in self.completed]
        if missing:
            raise RuntimeError(
                f"Phase '{phase}' cannot start before {', '.join(missing)} complete"
            )
        self.logger.info(
            f"Starting phase: {phase}",
            extra={
                "run_id": self.run_id,
                "phase": phase,
                "event": "phase_start",
                "target": target,
            },
        )
        self._phase_metrics.append(
            PhaseMetric(phase=phase, started_at=datetime.now(timezone.utc), target=target)
        )

    def _end_phase(self, phase: str, records: int) -> None:
        """Record end of a phase."""
        for metric in reversed(self._phase_metrics):
            if metric.phase == phase and metric.ended_at is None:
                metric.ended_at = datetime.now(timezone.utc)
                metric.records = records

                self.logger.info(
                    f"Completed phase: {phase} ({records:,} records)",
                    extra={
                        "run_id": self.run_id,
                        "phase": phase,
                        "event": "phase_end",
                        "records": records,
                        "duration_seconds": metric.duration_seconds,
                    },
                )
                break
        self.completed.append(phase)

    def _complete_run(
        self,
        start_time: float,
        counts: Dict[str, int],
        files: Dict[str, str],
        status: str,
        failed_phase: Optional[str] = None,
        error: Optional[str] = None,
        next_ids: Optional[Dict[str, int]] = None,
    ) -> RunResult:
        """Log run completion and return result."""
        duration = time.monotonic() - start_time

        self.logger.info(
            f"Run finished with status: {status}",
            extra={
                "run_id": self.run_id,
                "event": "run_complete",
                "records": sum(counts.values()),
                "duration_seconds": duration,
                "error": error,
            },
        )

        return RunResult(
            run_id=self.run_id,
            status=status,
            output_dir=self.config.output_dir,
            format=self.config.format,
            counts=counts,
            files=files,
            duration_seconds=duration,
            failed_phase=failed_phase,
            error=error,
            phases=list(self._phase_metrics),
            next_ids=next_ids or {},
        )
