"""Handler for ZeebeCluster CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..builders.connection import Connector
from ..config import OperatorConfig
from ..constants import API_GROUP_VERSION, KIND_ZEEBE_CLUSTER, LABEL_PROVIDER_CONFIG
from ..controller.external import ExternalCluster, ExternalObservation
from ..models import Condition, ZeebeCluster
from ..tracing import get_tracer, trace_span
from ..utils.conditions import set_cluster_condition
from ..utils.context import ReconcileContext, StopFlag, with_correlation_id
from ..utils.errors import AuthError, CredentialError, RemoteCallError, sanitize_exception
from ..utils.events import (
    emit_cluster_created,
    emit_cluster_deleted,
    emit_connect_failed,
    emit_drift_adopted,
)
from .base import BaseHandler
from .shared import build_connector


class ZeebeClusterHandler(BaseHandler):
    """Handler for ZeebeCluster resources.

    One call of ``reconcile`` is one reconcile pass: Connect, Observe, then
    Create or Update as the observation demands. ``delete`` runs on
    finalization.
    """

    def __init__(self, config: OperatorConfig, connector: Connector | None = None):
        super().__init__(KIND_ZEEBE_CLUSTER, retry_delay=config.retry_delay_seconds)
        self.config = config
        self._connector = connector

    @property
    def connector(self) -> Connector:
        if self._connector is None:
            self._connector = build_connector(self.config)
        return self._connector

    def _context(self, stopped: StopFlag | None) -> ReconcileContext:
        return ReconcileContext(stopped=stopped, timeout=self.config.reconcile_timeout_seconds)

    def _connect(self, body: dict[str, Any], cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalCluster:
        try:
            return self.connector.connect(cluster, ctx)
        except (CredentialError, AuthError, RemoteCallError) as e:
            emit_connect_failed(body, f"Cannot connect to Camunda Cloud: {sanitize_exception(e)}")
            raise

    def track_provider_config_usage(self, cluster: ZeebeCluster, meta: dict[str, Any], patch: kopf.Patch) -> None:
        """Label the resource with the ProviderConfig it uses."""
        labels = meta.get("labels") or {}
        if labels.get(LABEL_PROVIDER_CONFIG) != cluster.provider_config_name:
            patch.metadata["labels"] = {LABEL_PROVIDER_CONFIG: cluster.provider_config_name}

    def reconcile(
        self,
        body: dict[str, Any],
        patch: kopf.Patch,
        stopped: StopFlag | None = None,
        create: bool = True,
    ) -> None:
        """Run one reconcile pass for a ZeebeCluster.

        With ``create=False`` the pass never creates a missing remote cluster
        and leaves the status of such a resource to the change handlers.
        """
        cluster = ZeebeCluster.from_body(body)
        meta = body.get("metadata", {})
        ctx = self._context(stopped)

        with with_correlation_id(ctx.correlation_id), trace_span(
            get_tracer(), "reconcile_zeebecluster", kind=self.kind, attributes={"zeebecluster.name": cluster.name}
        ):
            self.track_provider_config_usage(cluster, meta, patch)

            external = self._connect(body, cluster, ctx)
            try:
                observation = external.observe(cluster, ctx)
                if not observation.resource_exists and not create:
                    self.log_info(meta, "Cluster not created yet, leaving creation to the change handlers")
                    return
                if not observation.resource_exists:
                    external.create(cluster, ctx)
                    emit_cluster_created(body, cluster.status.cluster_id)
                    self.log_info(
                        meta,
                        f"Created cluster {cluster.status.cluster_id}",
                        reason="ClusterCreated",
                        cluster_id=cluster.status.cluster_id,
                    )
                elif not observation.resource_up_to_date:
                    external.update(cluster, ctx)
                    self.log_warning(
                        meta,
                        "Cluster observation is not up to date, waiting for the next pass",
                        reason="ObservationStale",
                        cluster_id=cluster.status.cluster_id,
                    )
            finally:
                external.close()

            self.write_back(body, cluster, observation, patch)

    def write_back(
        self,
        body: dict[str, Any],
        cluster: ZeebeCluster,
        observation: ExternalObservation,
        patch: kopf.Patch,
    ) -> None:
        """Persist adopted spec fields, observed status and the Ready condition."""
        meta = body.get("metadata", {})

        if observation.adopted:
            patch.spec.update(cluster.spec.to_dict())
            emit_drift_adopted(body, list(observation.adopted))
            self.log_info(
                meta,
                "Adopted remote values into spec",
                reason="DriftAdopted",
                fields=sorted(observation.adopted),
            )

        conditions = cluster.conditions
        if cluster.condition is not None:
            conditions = set_cluster_condition(
                conditions, cluster.condition, observed_generation=cluster.generation
            )

        status_data = {**cluster.status.to_dict(), "conditions": conditions}
        self.update_resource_status(patch, meta, cluster.condition == Condition.AVAILABLE, status_data)

    def delete(
        self,
        body: dict[str, Any],
        patch: kopf.Patch,
        stopped: StopFlag | None = None,
    ) -> None:
        """Delete the remote cluster and release the finalizer."""
        cluster = ZeebeCluster.from_body(body)
        meta = body.get("metadata", {})
        ctx = self._context(stopped)

        with with_correlation_id(ctx.correlation_id), trace_span(
            get_tracer(), "delete_zeebecluster", kind=self.kind, attributes={"zeebecluster.name": cluster.name}
        ):
            external = self._connect(body, cluster, ctx)
            try:
                deletion = external.delete(cluster, ctx)
            finally:
                external.close()

        emit_cluster_deleted(body, deletion.note)
        self.log_info(meta, deletion.note, event="deletion", reason="ClusterDeleted")
        self.remove_finalizer(meta, patch)


_config = OperatorConfig.from_env()
_handler = ZeebeClusterHandler(_config)


@kopf.on.create(API_GROUP_VERSION, KIND_ZEEBE_CLUSTER)
@kopf.on.update(API_GROUP_VERSION, KIND_ZEEBE_CLUSTER)
@kopf.on.resume(API_GROUP_VERSION, KIND_ZEEBE_CLUSTER)
def handle_zeebe_cluster(
    body: kopf.Body,
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ZeebeCluster resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, patch))


@kopf.timer(
    API_GROUP_VERSION,
    KIND_ZEEBE_CLUSTER,
    interval=_config.drift_check_interval_seconds,
    initial_delay=_config.drift_check_interval_seconds,
    idle=_config.drift_check_interval_seconds,
)
def poll_zeebe_cluster(
    body: kopf.Body,
    patch: kopf.Patch,
    stopped: kopf.DaemonStopped,
    **kwargs: Any,
) -> None:
    """Periodically observe the remote cluster to pick up remote changes."""
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, patch, stopped, create=False))


@kopf.on.delete(API_GROUP_VERSION, KIND_ZEEBE_CLUSTER)
def handle_zeebe_cluster_delete(
    body: kopf.Body,
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ZeebeCluster resource deletion."""
    _handler.reconcile_with_metrics(body, lambda: _handler.delete(body, patch))
