"""Reconciler for IPoIBNetwork resources."""

from __future__ import annotations

from .. import metrics
from ..config import OperatorConfig
from ..constants import STATE_READY
from ..exceptions import NotFoundError
from ..models import ReconcileResult, ResourceIdentity, ResourceKind
from ..services.kube.base import ClusterStore
from ..state.types import StateSynchronizer
from ..tracing import add_span_attribute, trace_span
from ..utils.errors import sanitize_exception
from ..utils.events import EventRecorder
from .base import BaseHandler
from .status import StatusReporter


class IPoIBNetworkReconciler(BaseHandler):
    """Drives an IPoIBNetwork towards its desired state.

    Each call fetches the resource, hands it to the state synchronizer,
    records the outcome in the status and decides whether to come back later.
    Requeueing is driven by the state the synchronizer reports for the
    resource's own component, not by whether it reported an error.
    """

    def __init__(
        self,
        store: ClusterStore,
        synchronizer: StateSynchronizer,
        config: OperatorConfig,
        resource_kind: ResourceKind,
    ):
        super().__init__(resource_kind.kind)
        self.store = store
        self.synchronizer = synchronizer
        self.config = config
        self.resource_kind = resource_kind
        self.events = EventRecorder(store)
        self.status_reporter = StatusReporter(store, resource_kind)

    def reconcile(self, identity: ResourceIdentity) -> ReconcileResult:
        """Reconcile the resource identified by ``identity``.

        Returns:
            Whether and when to reconcile the resource again

        Raises:
            Exception: Fetch and status write failures, unchanged, so the
                caller retries with backoff
        """
        return self.reconcile_with_metrics(identity, lambda: self._reconcile(identity))

    def _reconcile(self, identity: ResourceIdentity) -> ReconcileResult:
        self.log_info(identity, "Reconciling IPoIBNetwork", event="reconcile", reason="Reconciling")

        with trace_span("reconcile_ipoib_network", kind=self.kind, attributes={"resource.name": identity.name}):
            try:
                resource = self.store.get(self.resource_kind, identity.name, identity.namespace)
            except NotFoundError:
                # Deleted after the request was queued; owned objects are garbage collected
                self.log_info(identity, "Resource not found, skipping", event="reconcile", reason="NotFound")
                metrics.reconcile_total.labels(kind=self.kind, result="not_found").inc()
                return ReconcileResult()

            results, sync_error = self.synchronizer.sync_state(resource, None)
            if sync_error is not None:
                self.log_warning(
                    identity,
                    "State sync reported an error",
                    event="sync",
                    reason="SyncFailed",
                    error=sanitize_exception(sync_error),
                )
                self.events.emit_sync_failed(resource, str(sync_error))

            try:
                self.status_reporter.update_status(resource, results, sync_error)
            except Exception as e:
                self.events.emit_reconcile_failed(resource, f"Reconciliation failed: {sanitize_exception(e)}")
                raise

            return self._result_for(identity, results.primary_status)

    def _result_for(self, identity: ResourceIdentity, state: str) -> ReconcileResult:
        add_span_attribute("ipoib_network.state", state)
        if state != STATE_READY:
            delay = self.config.requeue_time_seconds
            self.log_info(
                identity,
                f"Resource is {state}, requeueing in {delay}s",
                event="requeue",
                reason="NotReady",
            )
            metrics.reconcile_total.labels(kind=self.kind, result="requeue").inc()
            metrics.requeue_total.labels(kind=self.kind, reason="not_ready").inc()
            return ReconcileResult(requeue_after=float(delay))

        metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
        return ReconcileResult()
