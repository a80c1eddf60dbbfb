"""Prometheus metrics for the IPoIB Network Operator."""

from prometheus_client import Counter, Gauge, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "ipoib_network_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "ipoib_network_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

requeue_total = Counter(
    "ipoib_network_operator_requeue_total",
    "Total number of requeued reconciliation requests",
    ["kind", "reason"],
)

error_total = Counter(
    "ipoib_network_operator_error_total",
    "Total number of errors by type",
    ["kind", "error_type"],
)

# Status metrics
status_update_total = Counter(
    "ipoib_network_operator_status_update_total",
    "Total number of status writes",
    ["kind", "state", "result"],
)

# State synchronizer metrics
state_sync_total = Counter(
    "ipoib_network_operator_state_sync_total",
    "Total number of state sync results",
    ["state", "status"],
)

# API call metrics
api_call_total = Counter(
    "ipoib_network_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "ipoib_network_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "ipoib_network_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)

# Work queue metrics
workqueue_depth = Gauge(
    "ipoib_network_operator_workqueue_depth",
    "Number of reconciliation requests waiting in the work queue",
)

workqueue_adds_total = Counter(
    "ipoib_network_operator_workqueue_adds_total",
    "Total number of requests added to the work queue",
    ["source"],
)
