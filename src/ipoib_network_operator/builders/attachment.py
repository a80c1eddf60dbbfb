"""Builder for NetworkAttachmentDefinition objects."""

from __future__ import annotations

import json
from typing import Any

from ..constants import (
    CNI_TYPE_IPOIB,
    CNI_VERSION,
    DEFAULT_NETWORK_NAMESPACE,
    KIND_NETWORK_ATTACHMENT_DEFINITION,
    LABEL_MANAGED_BY,
    LABEL_STATE,
    NAD_GROUP_VERSION,
)


def get_network_namespace(resource: dict[str, Any]) -> str:
    """Namespace the attachment for ``resource`` lives in."""
    return resource.get("spec", {}).get("networkNamespace") or DEFAULT_NETWORK_NAMESPACE


def build_cni_config(name: str, spec: dict[str, Any]) -> dict[str, Any]:
    """Build the ipoib CNI configuration from an IPoIBNetwork spec.

    Args:
        name: Network name
        spec: IPoIBNetwork spec

    Returns:
        CNI configuration dict

    Raises:
        ValueError: If ``spec.ipam`` is not a JSON object
    """
    cni_config: dict[str, Any] = {
        "cniVersion": CNI_VERSION,
        "name": name,
        "type": CNI_TYPE_IPOIB,
    }

    master = spec.get("master")
    if master:
        cni_config["master"] = master

    ipam = (spec.get("ipam") or "").strip()
    if ipam:
        try:
            parsed = json.loads(ipam)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid ipam configuration: {e}") from e
        if not isinstance(parsed, dict):
            raise ValueError("invalid ipam configuration: expected a JSON object")
        cni_config["ipam"] = parsed

    return cni_config


def create_attachment_from_spec(resource: dict[str, Any], state_name: str) -> dict[str, Any]:
    """Create a NetworkAttachmentDefinition body for an IPoIBNetwork.

    The owner reference is not set here.

    Args:
        resource: IPoIBNetwork object
        state_name: Name of the state managing the attachment

    Returns:
        NetworkAttachmentDefinition body

    Raises:
        ValueError: If the resource spec cannot be rendered
    """
    name = resource["metadata"]["name"]
    cni_config = build_cni_config(name, resource.get("spec", {}))

    return {
        "apiVersion": NAD_GROUP_VERSION,
        "kind": KIND_NETWORK_ATTACHMENT_DEFINITION,
        "metadata": {
            "name": name,
            "namespace": get_network_namespace(resource),
            "labels": {
                LABEL_MANAGED_BY: "ipoib-network-operator",
                LABEL_STATE: state_name,
            },
        },
        "spec": {
            "config": json.dumps(cni_config, sort_keys=True),
        },
    }


def attachment_link(attachment: dict[str, Any]) -> str:
    """Return the status cross-reference for an attachment object."""
    meta = attachment.get("metadata", {})
    return "{}/namespaces/{}/{}/{}".format(
        attachment.get("apiVersion", NAD_GROUP_VERSION),
        meta.get("namespace", ""),
        attachment.get("kind", KIND_NETWORK_ATTACHMENT_DEFINITION),
        meta.get("name", ""),
    )
