"""Lifecycle executor: Observe, Create, Update and Delete a remote Zeebe cluster.

Each operation is one blocking call chain against the remote API. The
executor keeps no reference to the resource after a call returns, never
retries and never sleeps; retries belong to the framework.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from opentelemetry import trace

from .. import metrics
from ..constants import KIND_ZEEBE_CLUSTER
from ..models import Condition, ZeebeCluster
from ..services.camunda.base import ClusterService
from ..tracing import trace_span
from ..utils.context import ReconcileContext
from ..utils.errors import AuthError, ClusterNotFoundError, OperatorError, RemoteCallError
from .drift import detect_drift
from .status import map_ready_status

logger = logging.getLogger(__name__)


@dataclass
class ExternalObservation:
    """Outcome of Observe.

    ``resource_exists=False`` asks the framework to Create;
    ``resource_up_to_date=False`` asks it to Update and retry.
    """

    resource_exists: bool
    resource_up_to_date: bool
    connection_details: dict[str, str] = field(default_factory=dict)
    adopted: dict[str, tuple[str, str]] = field(default_factory=dict)


@dataclass
class ExternalCreation:
    connection_details: dict[str, str] = field(default_factory=dict)


@dataclass
class ExternalUpdate:
    connection_details: dict[str, str] = field(default_factory=dict)


@dataclass
class ExternalDeletion:
    """Outcome of Delete. ``note`` explains a deletion that needed no remote call."""

    deleted: bool
    note: str = ""


class ExternalCluster:
    """Drives one remote cluster through its lifecycle over a live session."""

    def __init__(self, service: ClusterService, tracer: trace.Tracer):
        self.service = service
        self.tracer = tracer

    def _span(self, name: str, cluster: ZeebeCluster):
        return trace_span(
            self.tracer,
            name,
            kind=KIND_ZEEBE_CLUSTER,
            attributes={
                "zeebecluster.name": cluster.name,
                "zeebecluster.id": cluster.status.cluster_id,
            },
        )

    def close(self) -> None:
        self.service.close()

    def observe(self, cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalObservation:
        """Observe the remote cluster, adopt drifted fields and map its health.

        Raises:
            RemoteCallError: If the name lookup fails
            ReconcileCancelled: If the pass is cancelled
        """
        with self._span("observe", cluster) as span:
            remote = self.service.get_cluster_by_name(cluster.name, ctx)

            drift = detect_drift(cluster.spec, cluster.status.cluster_id, remote)
            if not drift.exists:
                return ExternalObservation(resource_exists=False, resource_up_to_date=True)

            for key, (declared, observed) in drift.adopted.items():
                logger.info(
                    f"Adopting remote {key} for cluster {cluster.name}: {declared!r} -> {observed!r}"
                )
                metrics.drift_detected_total.labels(kind=KIND_ZEEBE_CLUSTER, field=key).inc()

            if remote is not None:
                if not cluster.status.cluster_id:
                    cluster.status.cluster_id = remote.id
                elif remote.id != cluster.status.cluster_id:
                    logger.warning(
                        f"Cluster {cluster.name} is recorded as {cluster.status.cluster_id} "
                        f"but the remote name lookup returned {remote.id}"
                    )
            span.set_attribute("zeebecluster.id", cluster.status.cluster_id)

            try:
                cluster_status = self.service.get_cluster_details(cluster.status.cluster_id, ctx)
            except (RemoteCallError, AuthError) as e:
                # not fatal: keep reporting existence and let the framework retry
                logger.warning(f"Failed to fetch details of cluster {cluster.name}: {type(e).__name__}")
                cluster.set_condition(map_ready_status(None).condition)
                return ExternalObservation(
                    resource_exists=True,
                    resource_up_to_date=False,
                    adopted=drift.adopted,
                )

            cluster.status.cluster_status = cluster_status
            mapping = map_ready_status(cluster_status.ready)
            cluster.set_condition(mapping.condition)
            span.set_attribute("zeebecluster.ready", cluster_status.ready)

            return ExternalObservation(
                resource_exists=True,
                resource_up_to_date=drift.up_to_date and mapping.up_to_date,
                adopted=drift.adopted,
            )

    def create(self, cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalCreation:
        """Create the remote cluster named after the resource.

        On failure the error propagates and ``clusterId`` stays empty, so the
        next Observe sees no cluster and Create is retried.
        """
        with self._span("create", cluster) as span:
            spec = cluster.spec
            try:
                cluster_id = self.service.create_cluster(
                    cluster.name,
                    spec.plan_name,
                    spec.channel_name,
                    spec.generation_name,
                    spec.region,
                    ctx,
                )
            except OperatorError:
                metrics.cluster_operations_total.labels(operation="create", result="failed").inc()
                raise

            cluster.status.cluster_id = cluster_id
            cluster.set_condition(Condition.CREATING)
            span.set_attribute("zeebecluster.id", cluster_id)
            metrics.cluster_operations_total.labels(operation="create", result="success").inc()
            logger.info(f"Created cluster {cluster.name} with id {cluster_id}")
            return ExternalCreation()

    def update(self, cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalUpdate:
        """No-op: drifted fields are adopted from the remote side, never pushed."""
        with self._span("update", cluster):
            metrics.cluster_operations_total.labels(operation="update", result="noop").inc()
            return ExternalUpdate()

    def delete(self, cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalDeletion:
        """Delete the remote cluster. A cluster that is already gone counts as deleted.

        Raises:
            RemoteCallError: For failures other than "not found"
        """
        with self._span("delete", cluster) as span:
            cluster_id = cluster.status.cluster_id
            if not cluster_id:
                # creation may have succeeded without the id being recorded
                remote = self.service.get_cluster_by_name(cluster.name, ctx)
                if remote is None:
                    metrics.cluster_operations_total.labels(operation="delete", result="absent").inc()
                    return ExternalDeletion(
                        deleted=True,
                        note=f"no remote cluster recorded or named {cluster.name}; nothing to delete",
                    )
                cluster_id = remote.id
                span.set_attribute("zeebecluster.id", cluster_id)

            try:
                self.service.delete_cluster(cluster_id, ctx)
            except ClusterNotFoundError:
                metrics.cluster_operations_total.labels(operation="delete", result="absent").inc()
                return ExternalDeletion(deleted=True, note=f"cluster {cluster_id} was already deleted")
            except OperatorError:
                metrics.cluster_operations_total.labels(operation="delete", result="failed").inc()
                raise

            metrics.cluster_operations_total.labels(operation="delete", result="success").inc()
            logger.info(f"Deleted cluster {cluster.name} ({cluster_id})")
            return ExternalDeletion(deleted=True, note=f"cluster {cluster_id} deleted")
