"""
txgen - Synthetic Relational Fixture Generator

Generates referentially consistent Users, Addresses, Payment Providers and
Transactions as line-delimited JSON or CSV, for test and benchmark fixtures.

Usage:
    from txgen_core import GenerationRunner, RunConfig

    runner = GenerationRunner(RunConfig(users=1000, transactions=100000, skewed=True))
    result = runner.run()
"""

__version__ = "0.3.0"

from .config import load_config, run_config_from_dict, validate_config
from .ids import IdAllocator
from .runner import GenerationRunner, RunConfig, RunResult
from .sinks import SinkError, open_sink
from .values import ValueProvider, build_value_provider

__all__ = [
    "GenerationRunner",
    "RunConfig",
    "RunResult",
    "IdAllocator",
    "SinkError",
    "ValueProvider",
    "build_value_provider",
    "load_config",
    "open_sink",
    "run_config_from_dict",
    "validate_config",
    "__version__",
]
