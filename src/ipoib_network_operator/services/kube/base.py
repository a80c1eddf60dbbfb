"""Cluster object store interface."""

from __future__ import annotations

from typing import Any, Protocol

from ...models import ResourceKind


class ClusterStore(Protocol):
    """Protocol defining the cluster object operations the operator uses."""

    def get(self, kind: ResourceKind, name: str, namespace: str = "") -> dict[str, Any]:
        """Get an object.

        Raises:
            NotFoundError: If the object does not exist
        """
        ...

    def create(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        """Create an object."""
        ...

    def replace(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        """Replace an object.

        Raises:
            ConflictError: If ``metadata.resourceVersion`` is stale
        """
        ...

    def update_status(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource of an object.

        Raises:
            ConflictError: If ``metadata.resourceVersion`` is stale
        """
        ...

    def create_event(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a core/v1 Event in ``metadata.namespace``."""
        ...
