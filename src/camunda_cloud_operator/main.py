"""Main entry point for the Camunda Cloud Operator.

Run with ``kopf run -m camunda_cloud_operator.main``.
"""

from __future__ import annotations

import threading
from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .tracing import initialize_tracing

_ready = threading.Event()


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    structured_logging.setup_structured_logging(config.log_level)
    initialize_tracing()

    # Use annotations so progress bookkeeping never conflicts with status writes
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = config.request_timeout_seconds
    # kopf serialises handlers per resource; this bounds concurrency across resources
    settings.execution.max_workers = config.max_workers

    health.start_metrics_server(config.metrics_port, is_ready=_ready.is_set)
    _ready.set()


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Mark the operator as not ready while it shuts down."""
    _ready.clear()
