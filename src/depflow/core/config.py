"""
Dependent task configuration for depflow

Provides the DependentConfig dataclass for polling cadence, wait bound,
interval timezone, and the history database location.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import pytz

DEFAULT_DATABASE_URL = "sqlite:///depflow.db"


def _float_env(key: str, default: str) -> float:
    """Read a float from environment, falling back to default on parse error."""
    value = os.getenv(key, default)
    try:
        return float(value)
    except ValueError:
        return float(default)


def _optional_float_env(key: str) -> float | None:
    value = os.getenv(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass
class DependentConfig:
    """Configuration for dependent task evaluation.

    Controls how often the outer loop polls, how long it may wait in total,
    which timezone relative date expressions are resolved in, and where the
    execution history lives.
    """

    poll_interval_seconds: float = 1.0
    timeout_seconds: float | None = None
    timezone: str | None = None
    database_url: str = DEFAULT_DATABASE_URL

    @classmethod
    def from_env(cls) -> DependentConfig:
        """Load configuration from environment variables."""
        return cls(
            poll_interval_seconds=_float_env("DEPFLOW_POLL_INTERVAL", "1.0"),
            timeout_seconds=_optional_float_env("DEPFLOW_DEPENDENT_TIMEOUT"),
            timezone=os.getenv("DEPFLOW_TIMEZONE") or None,
            database_url=os.getenv("DEPFLOW_DATABASE_URL", DEFAULT_DATABASE_URL),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if self.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be positive, got {self.poll_interval_seconds}"
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.timezone is not None and self.timezone not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        if not self.database_url:
            raise ValueError("database_url must not be empty")
