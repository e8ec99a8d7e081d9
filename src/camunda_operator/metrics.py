"""Prometheus metrics for the Camunda Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "camunda_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "camunda_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# External resource operations (observe/create/update/delete)
external_operations_total = Counter(
    "camunda_operator_external_operations_total",
    "Total number of external resource operations",
    ["kind", "operation", "result"],
)

# Token exchange metrics
token_exchange_total = Counter(
    "camunda_operator_token_exchange_total",
    "Total number of OAuth token exchanges",
    ["result"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "camunda_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind"],
)

# API call metrics
api_call_total = Counter(
    "camunda_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "camunda_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

error_total = Counter(
    "camunda_operator_error_total",
    "Total number of errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "camunda_operator_resource_status_total",
    "Observed availability of managed resources",
    ["kind", "status"],
)
