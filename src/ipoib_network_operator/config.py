"""Operator configuration.

Loaded once from environment variables at startup and passed explicitly to the
components that need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class OperatorConfig:
    """Controller configuration."""

    requeue_time_seconds: int = 5
    max_workers: int = 4
    metrics_port: int = 8080
    request_timeout: float = 30.0

    # Failure backoff: 1s, 2s, 4s, ... up to 60s
    min_retry_delay: float = 1.0
    max_retry_delay: float = 60.0
    retry_backoff: float = 2.0

    cluster_scoped: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.requeue_time_seconds < 0:
            raise ValueError("requeue_time_seconds must not be negative")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.min_retry_delay <= 0 or self.max_retry_delay < self.min_retry_delay:
            raise ValueError("retry delays must satisfy 0 < min_retry_delay <= max_retry_delay")
        if self.retry_backoff < 1.0:
            raise ValueError("retry_backoff must be >= 1.0")

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Load from environment variables."""
        return cls(
            requeue_time_seconds=int(os.getenv("CONTROLLER_REQUEUE_TIME", "5")),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            request_timeout=float(os.getenv("K8S_REQUEST_TIMEOUT", "30.0")),
            min_retry_delay=float(os.getenv("MIN_RETRY_DELAY", "1.0")),
            max_retry_delay=float(os.getenv("MAX_RETRY_DELAY", "60.0")),
            retry_backoff=float(os.getenv("RETRY_BACKOFF", "2.0")),
            cluster_scoped=_env_bool("IPOIB_NETWORK_CLUSTER_SCOPED", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
