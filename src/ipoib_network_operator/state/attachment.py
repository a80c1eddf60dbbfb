"""State managing the NetworkAttachmentDefinition of an IPoIBNetwork."""

from __future__ import annotations

import logging
from typing import Any

import kopf
from kubernetes.client.exceptions import ApiException

from ..builders.attachment import create_attachment_from_spec
from ..constants import STATE_ERROR, STATE_NAME_IPOIB_NETWORK, STATE_NOT_READY, STATE_READY
from ..exceptions import NotFoundError, StoreError
from ..models import NETWORK_ATTACHMENT_DEFINITION, ResourceKind
from ..services.kube.base import ClusterStore
from ..utils.errors import sanitize_exception
from .types import InfoCatalog

logger = logging.getLogger(__name__)


class NetworkAttachmentState:
    """Creates or updates the ipoib NetworkAttachmentDefinition."""

    name = STATE_NAME_IPOIB_NETWORK
    description = "IPoIB network attachment definition"

    def __init__(self, store: ClusterStore) -> None:
        self.store = store

    def sync(self, resource: dict[str, Any], info_catalog: InfoCatalog) -> tuple[str, Exception | None]:
        try:
            desired = create_attachment_from_spec(resource, self.name)
        except ValueError as e:
            return STATE_ERROR, e
        kopf.append_owner_reference(desired, owner=resource)

        try:
            self._apply(desired)
        except (StoreError, ApiException) as e:
            logger.warning(f"Failed to apply attachment for {resource['metadata']['name']}: {sanitize_exception(e)}")
            return STATE_NOT_READY, e
        return STATE_READY, None

    def _apply(self, desired: dict[str, Any]) -> None:
        meta = desired["metadata"]
        try:
            existing = self.store.get(NETWORK_ATTACHMENT_DEFINITION, meta["name"], meta["namespace"])
        except NotFoundError:
            logger.info(f"Creating NetworkAttachmentDefinition {meta['namespace']}/{meta['name']}")
            self.store.create(NETWORK_ATTACHMENT_DEFINITION, desired)
            return

        if not _needs_update(existing, desired):
            return

        meta["resourceVersion"] = existing.get("metadata", {}).get("resourceVersion")
        logger.info(f"Updating NetworkAttachmentDefinition {meta['namespace']}/{meta['name']}")
        self.store.replace(NETWORK_ATTACHMENT_DEFINITION, desired)

    def get_watch_sources(self) -> list[ResourceKind]:
        return [NETWORK_ATTACHMENT_DEFINITION]


def _needs_update(existing: dict[str, Any], desired: dict[str, Any]) -> bool:
    if existing.get("spec", {}).get("config") != desired["spec"]["config"]:
        return True
    existing_meta = existing.get("metadata", {})
    desired_meta = desired["metadata"]
    labels = existing_meta.get("labels") or {}
    if any(labels.get(k) != v for k, v in desired_meta["labels"].items()):
        return True
    owner_uids = {ref.get("uid") for ref in existing_meta.get("ownerReferences") or []}
    return any(ref.get("uid") not in owner_uids for ref in desired_meta.get("ownerReferences", []))
