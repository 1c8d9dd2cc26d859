"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime settings for the operator.

    All values come from the environment so the same image can be tuned per
    deployment without rebuilding.
    """

    log_level: str = "INFO"
    metrics_port: int = 8080
    drift_check_interval_seconds: float = 60.0
    retry_delay_seconds: float = 30.0
    reconcile_timeout_seconds: float = 120.0
    max_workers: int = 4
    api_url: str = "https://api.cloud.camunda.io"
    auth_url: str = "https://login.cloud.camunda.io/oauth/token"
    audience: str = "api.cloud.camunda.io"
    request_timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Build the configuration from the process environment."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            drift_check_interval_seconds=float(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "60")),
            retry_delay_seconds=float(os.getenv("RETRY_DELAY_SECONDS", "30")),
            reconcile_timeout_seconds=float(os.getenv("RECONCILE_TIMEOUT_SECONDS", "120")),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            api_url=os.getenv("CC_API_URL", "https://api.cloud.camunda.io").rstrip("/"),
            auth_url=os.getenv("CC_AUTH_URL", "https://login.cloud.camunda.io/oauth/token"),
            audience=os.getenv("CC_AUDIENCE", "api.cloud.camunda.io"),
            request_timeout_seconds=float(os.getenv("CC_REQUEST_TIMEOUT_SECONDS", "30")),
        )

