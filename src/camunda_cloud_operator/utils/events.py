"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_CLUSTER_CREATED,
    EVENT_REASON_CLUSTER_DELETED,
    EVENT_REASON_CONNECT_FAILED,
    EVENT_REASON_DRIFT_ADOPTED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body the event is attached to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_connect_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_CONNECT_FAILED, message, type_="Warning")


def emit_cluster_created(body: dict[str, Any], cluster_id: str) -> None:
    emit_event(body, EVENT_REASON_CLUSTER_CREATED, f"Cluster {cluster_id} created")


def emit_cluster_deleted(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_CLUSTER_DELETED, message)


def emit_drift_adopted(body: dict[str, Any], fields: list[str]) -> None:
    """Emit an event listing spec fields overwritten with remote values."""
    emit_event(
        body,
        EVENT_REASON_DRIFT_ADOPTED,
        f"Adopted remote values for {', '.join(sorted(fields))}",
    )
