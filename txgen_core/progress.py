"""
Progress reporting for generation phases.

The runner reports ``(phase, current, total)`` after every record. Any
callable with that signature works; TqdmProgress renders one bar per phase.
"""

from typing import Dict

from tqdm import tqdm


class TqdmProgress:
    """Renders a tqdm bar per phase, closing it once the phase reaches its total."""

    def __init__(self, disable: bool = False, **tqdm_kwargs):
        self.disable = disable
        self.tqdm_kwargs = tqdm_kwargs
        self._bars: Dict[str, tqdm] = {}

    def __call__(self, phase: str, current: int, total: int) -> None:
        bar = self._bars.get(phase)
        if bar is None:
            bar = tqdm(
                total=total,
                desc=f"Generating {phase}",
                unit="rec",
                disable=self.disable,
                **self.tqdm_kwargs,
            )
            self._bars[phase] = bar
        if current > bar.n:
            bar.update(current - bar.n)
        if current >= total:
            self.finish(phase)

    def finish(self, phase: str) -> None:
        bar = self._bars.pop(phase, None)
        if bar is not None:
            bar.close()

    def close(self) -> None:
        """Close any bars left open, e.g. after a failed run."""
        for phase in list(self._bars):
            self.finish(phase)
