"""Tests for watch registration and owner attribution."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from ipoib_network_operator.handlers.watches import controller_owner, register_watches
from ipoib_network_operator.models import (
    NETWORK_ATTACHMENT_DEFINITION,
    ResourceIdentity,
    ipoib_network_kind,
)
from ipoib_network_operator.workqueue import WorkQueue


def owned_attachment(owner_refs, namespace="ns2"):
    return {
        "apiVersion": "k8s.cni.cncf.io/v1",
        "kind": "NetworkAttachmentDefinition",
        "metadata": {"name": "net-a", "namespace": namespace, "ownerReferences": owner_refs},
    }


def owner_ref(name="net-a", kind="IPoIBNetwork", api_version="mellanox.com/v1alpha1", controller=True):
    return {"apiVersion": api_version, "kind": kind, "name": name, "uid": "uid-1", "controller": controller}


class TestControllerOwner:
    """Resolving the controlling owner of a dependent object."""

    def test_cluster_scoped_owner(self):
        body = owned_attachment([owner_ref()])

        owner = controller_owner(body, ipoib_network_kind(cluster_scoped=True))

        assert owner == ResourceIdentity("net-a", "")

    def test_namespaced_owner_takes_dependent_namespace(self):
        body = owned_attachment([owner_ref()], namespace="ns1")

        owner = controller_owner(body, ipoib_network_kind(cluster_scoped=False))

        assert owner == ResourceIdentity("net-a", "ns1")

    def test_non_controller_reference_ignored(self):
        body = owned_attachment([owner_ref(controller=False)])

        assert controller_owner(body, ipoib_network_kind()) is None

    def test_other_kind_ignored(self):
        body = owned_attachment([owner_ref(kind="MacvlanNetwork")])

        assert controller_owner(body, ipoib_network_kind()) is None

    def test_other_group_ignored(self):
        body = owned_attachment([owner_ref(api_version="example.com/v1alpha1")])

        assert controller_owner(body, ipoib_network_kind()) is None

    def test_any_version_of_group_matches(self):
        body = owned_attachment([owner_ref(api_version="mellanox.com/v1beta1")])

        assert controller_owner(body, ipoib_network_kind()) == ResourceIdentity("net-a", "")

    def test_no_owner_references(self):
        body = owned_attachment(None)

        assert controller_owner(body, ipoib_network_kind()) is None

    def test_controller_picked_among_several(self):
        body = owned_attachment([
            owner_ref(name="other", controller=False),
            owner_ref(name="net-a"),
        ])

        assert controller_owner(body, ipoib_network_kind()) == ResourceIdentity("net-a", "")


@pytest.fixture
def registered():
    """Register watches with kopf.on.event captured."""
    handlers = {}

    def fake_event(**kwargs):
        def decorator(fn):
            handlers[kwargs["plural"]] = (kwargs, fn)
            return fn
        return decorator

    synchronizer = MagicMock()
    synchronizer.get_watch_sources.return_value = [NETWORK_ATTACHMENT_DEFINITION]
    queue = WorkQueue()
    registry = MagicMock()

    with patch("ipoib_network_operator.handlers.watches.kopf.on.event", side_effect=fake_event):
        sources = register_watches(registry, synchronizer, queue, ipoib_network_kind(cluster_scoped=True))

    return handlers, queue, sources, registry


class TestRegisterWatches:
    """Watches registered at setup."""

    def test_registers_primary_and_dependents(self, registered):
        handlers, _, sources, registry = registered

        assert set(handlers) == {"ipoibnetworks", "network-attachment-definitions"}
        assert sources == [NETWORK_ATTACHMENT_DEFINITION]
        primary_kwargs, _ = handlers["ipoibnetworks"]
        assert primary_kwargs["group"] == "mellanox.com"
        assert primary_kwargs["version"] == "v1alpha1"
        assert primary_kwargs["registry"] is registry
        dependent_kwargs, _ = handlers["network-attachment-definitions"]
        assert dependent_kwargs["group"] == "k8s.cni.cncf.io"
        assert dependent_kwargs["registry"] is registry

    @pytest.mark.asyncio
    async def test_primary_event_enqueues_itself(self, registered):
        handlers, queue, _, _ = registered
        _, handler = handlers["ipoibnetworks"]
        body = {"metadata": {"name": "net-a"}}

        await handler(body=body, type="MODIFIED")
        await handler(body=body, type="MODIFIED")

        assert len(queue) == 1
        assert await queue.get() == ResourceIdentity("net-a", "")

    @pytest.mark.asyncio
    async def test_primary_delete_event_enqueues(self, registered):
        handlers, queue, _, _ = registered
        _, handler = handlers["ipoibnetworks"]

        await handler(body={"metadata": {"name": "net-a"}}, type="DELETED")

        assert len(queue) == 1

    @pytest.mark.asyncio
    async def test_dependent_event_enqueues_owner(self, registered):
        handlers, queue, _, _ = registered
        _, handler = handlers["network-attachment-definitions"]

        await handler(body=owned_attachment([owner_ref()]), type="MODIFIED")

        assert await queue.get() == ResourceIdentity("net-a", "")

    @pytest.mark.asyncio
    async def test_unowned_dependent_event_ignored(self, registered):
        handlers, queue, _, _ = registered
        _, handler = handlers["network-attachment-definitions"]

        await handler(body=owned_attachment([]), type="ADDED")

        assert len(queue) == 0
