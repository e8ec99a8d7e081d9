"""Constants for the Camunda Operator."""

# API Group
API_GROUP = "camunda.cloud37.dev"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_CLUSTER = "Cluster"
KIND_CLIENT = "Client"
KIND_PROVIDER_CONFIG = "ProviderConfig"

PLURAL_PROVIDER_CONFIGS = "providerconfigs"

# Annotations
ANNOTATION_EXTERNAL_NAME = f"{API_GROUP}/external-name"

# Labels
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"
LABEL_RESOURCE_KIND = f"{API_GROUP}/resource-kind"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Field Manager
FIELD_MANAGER = "camunda-operator"
CONTROLLER_NAME = "camunda-operator"

# Defaults
DEFAULT_PROVIDER_CONFIG = "default"
DEFAULT_TOKEN_URL = "https://login.cloud.camunda.io/oauth/token"
DEFAULT_AUDIENCE = "api.cloud.camunda.io"

# Deletion policies
DELETION_POLICY_DELETE = "Delete"
DELETION_POLICY_ORPHAN = "Orphan"

# Connection detail keys
CONN_ZEEBE_CLIENT_ID = "ZEEBE_CLIENT_ID"
CONN_ZEEBE_CLIENT_SECRET = "ZEEBE_CLIENT_SECRET"
CONN_ZEEBE_ADDRESS = "ZEEBE_ADDRESS"
CONN_ZEEBE_AUTHORIZATION_SERVER_URL = "ZEEBE_AUTHORIZATION_SERVER_URL"
CONN_OPERATE = "operate"
CONN_OPTIMIZE = "optimize"
CONN_TASKLIST = "tasklist"
CONN_ZEEBE = "zeebe"

# Condition Types
COND_READY = "Ready"
COND_SYNCED = "Synced"
COND_AUTH_VALID = "AuthValid"

# Condition Reasons
REASON_AVAILABLE = "Available"
REASON_CREATING = "Creating"
REASON_UNAVAILABLE = "Unavailable"
REASON_RECONCILE_SUCCESS = "ReconcileSuccess"
REASON_RECONCILE_ERROR = "ReconcileError"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_CONNECT_FAILED = "CannotConnectToProvider"
EVENT_REASON_OBSERVE_FAILED = "CannotObserveExternalResource"
EVENT_REASON_CREATED = "CreatedExternalResource"
EVENT_REASON_CREATE_FAILED = "CannotCreateExternalResource"
EVENT_REASON_DRIFT_DETECTED = "DriftDetected"
EVENT_REASON_DELETED = "DeletedExternalResource"
EVENT_REASON_DELETE_FAILED = "CannotDeleteExternalResource"
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
