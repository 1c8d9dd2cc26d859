"""Prometheus metrics for the Camunda Cloud Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "camunda_cloud_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "camunda_cloud_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

error_total = Counter(
    "camunda_cloud_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "camunda_cloud_operator_resource_status_total",
    "Resource status observations",
    ["kind", "status"],
)

# Cluster lifecycle metrics
cluster_operations_total = Counter(
    "camunda_cloud_operator_cluster_operations_total",
    "Total number of remote cluster lifecycle operations",
    ["operation", "result"],
)

# Drift adoption metrics
drift_detected_total = Counter(
    "camunda_cloud_operator_drift_detected_total",
    "Total number of spec fields adopted from the remote cluster",
    ["kind", "field"],
)

# API call metrics
api_call_total = Counter(
    "camunda_cloud_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "camunda_cloud_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)
