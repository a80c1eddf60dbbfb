"""Status reporting for IPoIBNetwork resources."""

from __future__ import annotations

from typing import Any

from .. import metrics
from ..builders.attachment import attachment_link, get_network_namespace
from ..constants import STATE_READY
from ..models import NETWORK_ATTACHMENT_DEFINITION, ResourceKind, identity_of
from ..services.kube.base import ClusterStore
from ..state.types import SyncResults
from ..tracing import trace_span
from ..utils.events import EventRecorder
from .base import BaseHandler


class StatusReporter(BaseHandler):
    """Folds sync results into the status block and persists it."""

    def __init__(self, store: ClusterStore, resource_kind: ResourceKind):
        super().__init__(resource_kind.kind)
        self.store = store
        self.resource_kind = resource_kind
        self.events = EventRecorder(store)

    def update_status(
        self,
        resource: dict[str, Any],
        results: SyncResults,
        sync_error: Exception | None,
    ) -> None:
        """Update ``resource.status`` from a sync pass and write it to the cluster.

        The attachment lookup done for ready resources is best effort: its
        failure is logged and raised only after the status write went through.
        A failed write is always raised and takes precedence.

        Args:
            resource: IPoIBNetwork object, its status is modified in place
            results: Results of the synchronizer pass
            sync_error: Error reported by the synchronizer, if any

        Raises:
            ConflictError: If the resource changed since it was read
            Exception: Any other status write or attachment lookup failure
        """
        identity = identity_of(resource)
        status = dict(resource.get("status") or {})
        previous_state = status.get("state")

        state = results.primary_status
        status["state"] = state
        if sync_error is not None:
            status["reason"] = str(sync_error)

        lookup_error: Exception | None = None
        status.pop("attachmentRef", None)
        if state == STATE_READY:
            network_namespace = get_network_namespace(resource)
            try:
                attachment = self.store.get(NETWORK_ATTACHMENT_DEFINITION, identity.name, network_namespace)
            except Exception as e:
                self.log_error(
                    identity,
                    "Can not retrieve NetworkAttachmentDefinition object",
                    error=e,
                    reason="AttachmentLookupFailed",
                    attachment_namespace=network_namespace,
                )
                lookup_error = e
            else:
                status["attachmentRef"] = attachment_link(attachment)

        resource["status"] = status

        self.log_info(identity, "Updating status", event="status", reason="StatusUpdate", status=status)
        with trace_span("update_status", kind=self.kind, attributes={"resource.name": identity.name}):
            try:
                self.store.update_status(self.resource_kind, resource)
            except Exception as e:
                metrics.status_update_total.labels(kind=self.kind, state=state, result="error").inc()
                self.log_error(identity, "Failed to update CR status", error=e, reason="StatusUpdateFailed")
                raise

        metrics.status_update_total.labels(kind=self.kind, state=state, result="success").inc()
        if previous_state != state:
            self.events.emit_state_changed(resource, previous_state, state)

        if lookup_error is not None:
            raise lookup_error
