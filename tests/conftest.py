"""Pytest configuration and fixtures."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from ipoib_network_operator.config import OperatorConfig
from ipoib_network_operator.exceptions import NotFoundError
from ipoib_network_operator.models import ResourceKind, ipoib_network_kind
from ipoib_network_operator.state.types import StateResult, SyncResults


class FakeStore:
    """In-memory cluster store recording writes."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.get_errors: dict[tuple[str, str, str], Exception] = {}
        self.update_status_error: Exception | None = None
        self.status_updates: list[dict[str, Any]] = []
        self.created: list[dict[str, Any]] = []
        self.replaced: list[dict[str, Any]] = []
        self.events: list[dict[str, Any]] = []
        self.create_event_error: Exception | None = None

    @staticmethod
    def _key(kind: ResourceKind, name: str, namespace: str) -> tuple[str, str, str]:
        return (kind.plural, namespace if kind.namespaced else "", name)

    def put(self, kind: ResourceKind, body: dict[str, Any]) -> None:
        meta = body["metadata"]
        self.objects[self._key(kind, meta["name"], meta.get("namespace", ""))] = copy.deepcopy(body)

    def get(self, kind: ResourceKind, name: str, namespace: str = "") -> dict[str, Any]:
        key = self._key(kind, name, namespace)
        if key in self.get_errors:
            raise self.get_errors[key]
        if key not in self.objects:
            raise NotFoundError(f"{kind.plural}/{name} not found")
        return copy.deepcopy(self.objects[key])

    def create(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        self.created.append(copy.deepcopy(body))
        self.put(kind, body)
        return body

    def replace(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        self.replaced.append(copy.deepcopy(body))
        self.put(kind, body)
        return body

    def update_status(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        if self.update_status_error is not None:
            raise self.update_status_error
        self.status_updates.append(copy.deepcopy(body))
        self.put(kind, body)
        return body

    def create_event(self, body: dict[str, Any]) -> dict[str, Any]:
        if self.create_event_error is not None:
            raise self.create_event_error
        self.events.append(copy.deepcopy(body))
        return body

    def event_reasons(self) -> list[str]:
        return [event["reason"] for event in self.events]


def make_results(*statuses: str, errors: list[Exception | None] | None = None) -> SyncResults:
    """Build sync results with one entry per status."""
    errors = errors or [None] * len(statuses)
    return SyncResults(
        status=statuses[0] if statuses else "notReady",
        states_status=[
            StateResult(state_name=f"state-{i}", status=status, error=error)
            for i, (status, error) in enumerate(zip(statuses, errors))
        ],
    )


@pytest.fixture
def config():
    """Operator configuration with a distinctive requeue delay."""
    return OperatorConfig(requeue_time_seconds=7)


@pytest.fixture
def namespaced_kind():
    """IPoIBNetwork kind registered as a namespaced resource."""
    return ipoib_network_kind(cluster_scoped=False)


@pytest.fixture
def store():
    """Empty in-memory store."""
    return FakeStore()


@pytest.fixture
def ipoib_network():
    """IPoIBNetwork net-a in ns1 targeting ns2."""
    return {
        "apiVersion": "mellanox.com/v1alpha1",
        "kind": "IPoIBNetwork",
        "metadata": {
            "name": "net-a",
            "namespace": "ns1",
            "uid": "0b7c1f7e-1111-2222-3333-444455556666",
            "resourceVersion": "100",
        },
        "spec": {
            "networkNamespace": "ns2",
            "master": "ib0",
            "ipam": '{"type": "whereabouts", "range": "192.168.5.225/28"}',
        },
    }


@pytest.fixture
def attachment():
    """NetworkAttachmentDefinition net-a in ns2."""
    return {
        "apiVersion": "k8s.cni.cncf.io/v1",
        "kind": "NetworkAttachmentDefinition",
        "metadata": {"name": "net-a", "namespace": "ns2", "resourceVersion": "7"},
        "spec": {"config": "{}"},
    }
