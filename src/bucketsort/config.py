"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from bucketsort.domain.errors import ValidationError

DEFAULT_LOOKBACK_YEARS = 5
DEFAULT_FETCH_CONCURRENCY = 4
DEFAULT_LOG_LEVEL = "WARNING"


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got '{raw}'")
    if value < 1:
        raise ValidationError(f"{name} must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Settings for scanning stored transactions and for logging.

    Attributes:
        lookback_years: Number of calendar years scanned for stored
            transactions, the current year included
        fetch_concurrency: Maximum number of partition queries in flight
        log_level: Level name for the package logger
    """

    lookback_years: int = DEFAULT_LOOKBACK_YEARS
    fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.lookback_years < 1:
            raise ValidationError(f"lookback_years must be at least 1, got {self.lookback_years}")
        if self.fetch_concurrency < 1:
            raise ValidationError(
                f"fetch_concurrency must be at least 1, got {self.fetch_concurrency}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from BUCKETSORT_* environment variables.

        Args:
            env: Mapping to read instead of os.environ

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        if env is None:
            env = os.environ
        return cls(
            lookback_years=_positive_int(env, "BUCKETSORT_LOOKBACK_YEARS", DEFAULT_LOOKBACK_YEARS),
            fetch_concurrency=_positive_int(
                env, "BUCKETSORT_FETCH_CONCURRENCY", DEFAULT_FETCH_CONCURRENCY
            ),
            log_level=env.get("BUCKETSORT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
