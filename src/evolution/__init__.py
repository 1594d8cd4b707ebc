"""Hooks the evolutionary engine calls to record a run."""

from evolution.stats_recorder import ConfigurationError, StatsRecorder, parse_seed

__all__ = [
    "ConfigurationError",
    "StatsRecorder",
    "parse_seed",
]
