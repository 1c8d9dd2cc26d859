"""Reconciliation core: drift detection, status mapping and the lifecycle executor."""

from .drift import DriftResult, detect_drift
from .external import (
    ExternalCluster,
    ExternalCreation,
    ExternalDeletion,
    ExternalObservation,
    ExternalUpdate,
)
from .status import StatusMapping, map_ready_status

__all__ = [
    "DriftResult",
    "detect_drift",
    "ExternalCluster",
    "ExternalCreation",
    "ExternalDeletion",
    "ExternalObservation",
    "ExternalUpdate",
    "StatusMapping",
    "map_ready_status",
]
