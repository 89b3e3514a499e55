"""
Shared fixtures for txgen tests.
"""

import logging
import os
import random
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from txgen_core.ids import IdAllocator
from txgen_core.stages.base import StageContext
from txgen_core.values import ValueProvider


class StubValueProvider(ValueProvider):
    """Deterministic values: every call returns '<field> <n>' with a running n."""

    def __init__(self):
        self.calls = 0

    def _next(self, label: str) -> str:
        self.calls += 1
        return f"{label} {self.calls}"

    def full_name(self) -> str:
        return self._next("Person")

    def email_domain(self) -> str:
        return "example.com"

    def phone_number(self) -> str:
        return self._next("555-0100 x")

    def street_name(self) -> str:
        return self._next("Main Street")

    def city(self) -> str:
        return self._next("Springfield, North")

    def state(self) -> str:
        return self._next("State")

    def country(self) -> str:
        return self._next("Country")

    def postal_code(self) -> str:
        return self._next("0000")


class RecordingSink:
    """In-memory sink collecting written records."""

    def __init__(self):
        self.records = []

    def write(self, record):
        self.records.append(record)

    def close(self):
        pass


def make_context(seed=7, progress=None, **overrides):
    """Create a StageContext with a shared allocator and a stub value provider."""
    kwargs = dict(
        allocator=IdAllocator("shared", 1),
        values=StubValueProvider(),
        rng=random.Random(seed),
        run_id="test-run-001",
        logger=logging.getLogger("test"),
        progress=progress,
    )
    kwargs.update(overrides)
    return StageContext(**kwargs)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """configure_logging replaces root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def stub_values():
    return StubValueProvider()


@pytest.fixture
def ctx():
    return make_context()
