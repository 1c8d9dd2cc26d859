"""Constants for the Camunda Cloud Operator."""

# API Group
API_GROUP = "cc.camunda.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_ZEEBE_CLUSTER = "ZeebeCluster"
KIND_PROVIDER_CONFIG = "ProviderConfig"

# Plurals
PLURAL_ZEEBE_CLUSTERS = "zeebeclusters"
PLURAL_PROVIDER_CONFIGS = "providerconfigs"

DEFAULT_PROVIDER_CONFIG = "default"

# Labels
LABEL_PROVIDER_CONFIG = f"{API_GROUP}/provider-config"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Controller
CONTROLLER_NAME = "camunda-cloud-operator"

# Credential payload fields
CREDENTIALS_CLIENT_ID = "ccClientId"
CREDENTIALS_CLIENT_SECRET = "ccSecretId"
CREDENTIALS_SOURCE_SECRET = "Secret"

# Remote ready values
REMOTE_READY_HEALTHY = "Healthy"
REMOTE_READY_CREATING = "Creating"
REMOTE_READY_NOT_HEALTHY = "Not Healthy"

# Condition Types
COND_READY = "Ready"
COND_AUTH_VALID = "AuthValid"

# Condition Reasons
REASON_AVAILABLE = "Available"
REASON_CREATING = "Creating"
REASON_UNAVAILABLE = "Unavailable"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_CLUSTER_CREATED = "ClusterCreated"
EVENT_REASON_CLUSTER_DELETED = "ClusterDeleted"
EVENT_REASON_DRIFT_ADOPTED = "DriftAdopted"
EVENT_REASON_CONNECT_FAILED = "ConnectFailed"
