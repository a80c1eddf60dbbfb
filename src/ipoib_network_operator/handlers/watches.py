"""Registers the watches that feed the work queue."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import kopf

from ..models import ResourceIdentity, ResourceKind, identity_of
from ..state.types import StateSynchronizer
from ..workqueue import WorkQueue

logger = logging.getLogger(__name__)


def controller_owner(body: Mapping[str, Any], owner_kind: ResourceKind) -> ResourceIdentity | None:
    """Identity of the controlling owner of ``body`` if it is of ``owner_kind``.

    Only the owner reference flagged ``controller: true`` counts. The API
    version is matched on group alone, so owners are found across versions.

    Args:
        body: Dependent object
        owner_kind: Kind of the owning resource

    Returns:
        Owner identity, or None if the object has no such controller
    """
    meta = body.get("metadata", {})
    for ref in meta.get("ownerReferences") or []:
        if not ref.get("controller"):
            continue
        group = ref.get("apiVersion", "").rpartition("/")[0]
        if ref.get("kind") != owner_kind.kind or group != owner_kind.group:
            continue
        namespace = (meta.get("namespace") or "") if owner_kind.namespaced else ""
        return ResourceIdentity(name=ref["name"], namespace=namespace)
    return None


def register_watches(
    registry: kopf.OperatorRegistry,
    synchronizer: StateSynchronizer,
    queue: WorkQueue,
    resource_kind: ResourceKind,
) -> list[ResourceKind]:
    """Wire primary and dependent object events into ``queue``.

    Events on the primary resource enqueue the resource itself. Events on the
    kinds reported by ``synchronizer.get_watch_sources()`` enqueue their
    controlling owner.

    Returns:
        The dependent kinds that were registered
    """

    async def enqueue_primary(body: kopf.Body, type: str | None, **_: Any) -> None:
        identity = identity_of(body)
        logger.debug(f"{resource_kind.kind} {identity} event {type}, enqueueing")
        queue.add(identity, source="primary")

    kopf.on.event(
        group=resource_kind.group,
        version=resource_kind.version,
        plural=resource_kind.plural,
        id=f"watch-{resource_kind.plural}",
        registry=registry,
    )(enqueue_primary)

    watch_sources = synchronizer.get_watch_sources()
    logger.info(f"Watch sources: {[source.kind for source in watch_sources]}")

    for source in watch_sources:
        kopf.on.event(
            group=source.group,
            version=source.version,
            plural=source.plural,
            id=f"watch-{source.plural}",
            registry=registry,
        )(_owner_enqueuer(queue, source, resource_kind))

    return watch_sources


def _owner_enqueuer(queue: WorkQueue, source: ResourceKind, owner_kind: ResourceKind) -> Any:
    async def enqueue_owner(body: kopf.Body, type: str | None, **_: Any) -> None:
        owner = controller_owner(body, owner_kind)
        if owner is None:
            return
        logger.debug(f"{source.kind} {identity_of(body)} event {type}, enqueueing owner {owner}")
        queue.add(owner, source="dependent")

    return enqueue_owner
