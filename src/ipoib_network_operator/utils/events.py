"""Utilities for emitting Kubernetes events.

Events are posted directly through the cluster store, so they work from the
controller workers, which run outside kopf's per-object handler context.
Posting is best effort: a failed post is logged and never changes the
outcome of a reconciliation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..constants import (
    CONTROLLER_NAME,
    DEFAULT_NETWORK_NAMESPACE,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_STATE_CHANGED,
    EVENT_REASON_SYNC_FAILED,
)
from ..services.kube.base import ClusterStore
from .errors import sanitize_exception

logger = logging.getLogger(__name__)

# Kubernetes rejects longer event messages
MAX_MESSAGE_LENGTH = 1024


def build_event(body: dict[str, Any], reason: str, message: str, type_: str = "Normal") -> dict[str, Any]:
    """Build a core/v1 Event about ``body``.

    Events about cluster-scoped objects are recorded in the default namespace.
    """
    meta = body.get("metadata", {})
    namespace = meta.get("namespace") or DEFAULT_NETWORK_NAMESPACE
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    if len(message) > MAX_MESSAGE_LENGTH:
        message = message[: MAX_MESSAGE_LENGTH - 3] + "..."

    return {
        "apiVersion": "v1",
        "kind": "Event",
        "metadata": {
            "generateName": f"{meta.get('name', 'unknown')}.",
            "namespace": namespace,
        },
        "involvedObject": {
            "apiVersion": body.get("apiVersion"),
            "kind": body.get("kind"),
            "name": meta.get("name"),
            "namespace": meta.get("namespace"),
            "uid": meta.get("uid"),
            "resourceVersion": meta.get("resourceVersion"),
        },
        "reason": reason,
        "message": message,
        "type": type_,
        "source": {"component": CONTROLLER_NAME},
        "reportingComponent": CONTROLLER_NAME,
        "firstTimestamp": now,
        "lastTimestamp": now,
        "count": 1,
    }


class EventRecorder:
    """Posts events about resources through a cluster store."""

    def __init__(self, store: ClusterStore):
        self.store = store

    def emit_event(
        self,
        body: dict[str, Any],
        reason: str,
        message: str,
        type_: str = "Normal",
    ) -> None:
        """Emit a Kubernetes event.

        Args:
            body: Body of the involved object
            reason: Event reason
            message: Event message
            type_: Event type (Normal or Warning)
        """
        event = build_event(body, reason, message, type_)
        try:
            self.store.create_event(event)
        except Exception as e:
            logger.warning(
                f"Failed to post {reason} event for {body.get('metadata', {}).get('name')}: "
                f"{sanitize_exception(e)}"
            )

    def emit_reconcile_failed(self, body: dict[str, Any], message: str) -> None:
        """Emit reconcile failed event."""
        self.emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")

    def emit_state_changed(self, body: dict[str, Any], old_state: str | None, new_state: str) -> None:
        """Emit state changed event."""
        self.emit_event(
            body, EVENT_REASON_STATE_CHANGED, f"State changed from {old_state or 'unset'} to {new_state}"
        )

    def emit_sync_failed(self, body: dict[str, Any], message: str) -> None:
        """Emit state sync failed event."""
        self.emit_event(body, EVENT_REASON_SYNC_FAILED, message, type_="Warning")
