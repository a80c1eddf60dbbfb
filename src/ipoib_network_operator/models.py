"""Models shared by the controller components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .constants import (
    API_GROUP,
    API_VERSION,
    KIND_IPOIB_NETWORK,
    KIND_NETWORK_ATTACHMENT_DEFINITION,
    NAD_GROUP,
    NAD_VERSION,
    PLURAL_IPOIB_NETWORK,
    PLURAL_NETWORK_ATTACHMENT_DEFINITION,
)


@dataclass(frozen=True)
class ResourceIdentity:
    """Name and namespace of an object. Namespace is empty for cluster-scoped objects."""

    name: str
    namespace: str = ""

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class ResourceKind:
    """Describes an object kind the operator reads or watches."""

    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool = True


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one successful reconciliation attempt."""

    requeue_after: float | None = None

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None


NETWORK_ATTACHMENT_DEFINITION = ResourceKind(
    group=NAD_GROUP,
    version=NAD_VERSION,
    kind=KIND_NETWORK_ATTACHMENT_DEFINITION,
    plural=PLURAL_NETWORK_ATTACHMENT_DEFINITION,
    namespaced=True,
)


def ipoib_network_kind(cluster_scoped: bool = True) -> ResourceKind:
    """Descriptor of the IPoIBNetwork custom resource."""
    return ResourceKind(
        group=API_GROUP,
        version=API_VERSION,
        kind=KIND_IPOIB_NETWORK,
        plural=PLURAL_IPOIB_NETWORK,
        namespaced=not cluster_scoped,
    )


def identity_of(obj: dict[str, Any]) -> ResourceIdentity:
    """Build the identity of a Kubernetes object body."""
    meta = obj.get("metadata", {})
    return ResourceIdentity(name=meta.get("name", ""), namespace=meta.get("namespace") or "")
