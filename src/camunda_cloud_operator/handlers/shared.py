"""Shared utilities for handlers."""

from __future__ import annotations

import time
from typing import Any

from kubernetes import client, config

from .. import metrics
from ..builders.connection import ConnectionFactory, Connector, client_factory_from_config
from ..config import OperatorConfig
from ..constants import API_GROUP, API_VERSION, LABEL_PROVIDER_CONFIG, PLURAL_ZEEBE_CLUSTERS
from ..tracing import get_tracer


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def get_k8s_clients() -> tuple[client.CoreV1Api, client.CustomObjectsApi]:
    """Get Kubernetes CoreV1Api and CustomObjectsApi clients."""
    load_kube_config()
    return client.CoreV1Api(), client.CustomObjectsApi()


def build_connector(operator_config: OperatorConfig) -> Connector:
    """Wire a Connector from the operator configuration."""
    core_api, custom_api = get_k8s_clients()
    return Connector(
        core_api=core_api,
        custom_api=custom_api,
        connection_factory=ConnectionFactory(client_factory_from_config(operator_config)),
        tracer=get_tracer(),
    )


def list_provider_config_users(api: client.CustomObjectsApi, provider_config_name: str) -> list[dict[str, Any]]:
    """List ZeebeClusters labelled as using the given ProviderConfig."""
    start_time = time.time()
    try:
        result = api.list_cluster_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            plural=PLURAL_ZEEBE_CLUSTERS,
            label_selector=f"{LABEL_PROVIDER_CONFIG}={provider_config_name}",
        )
        metrics.api_call_total.labels(api_type="k8s", operation="list_zeebeclusters", result="success").inc()
        return result.get("items", [])
    except Exception:
        metrics.api_call_total.labels(api_type="k8s", operation="list_zeebeclusters", result="error").inc()
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation="list_zeebeclusters").observe(duration)
