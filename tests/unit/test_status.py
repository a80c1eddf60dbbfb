"""Tests for the status reporter."""

from __future__ import annotations

import pytest
from kubernetes.client.exceptions import ApiException

from conftest import make_results
from ipoib_network_operator.exceptions import ConflictError, NotFoundError, SyncError
from ipoib_network_operator.handlers.status import StatusReporter
from ipoib_network_operator.models import NETWORK_ATTACHMENT_DEFINITION

ATTACHMENT_KEY = ("network-attachment-definitions", "ns2", "net-a")
ATTACHMENT_REF = "k8s.cni.cncf.io/v1/namespaces/ns2/NetworkAttachmentDefinition/net-a"


@pytest.fixture
def reporter(store, namespaced_kind):
    return StatusReporter(store, namespaced_kind)


class TestStateAndReason:
    """state and reason fields."""

    def test_state_from_first_component(self, reporter, store, ipoib_network):
        reporter.update_status(ipoib_network, make_results("notReady", "ready"), None)

        assert store.status_updates[-1]["status"]["state"] == "notReady"

    def test_reason_from_sync_error(self, reporter, store, ipoib_network):
        reporter.update_status(ipoib_network, make_results("notReady"), SyncError("device busy"))

        assert store.status_updates[-1]["status"]["reason"] == "device busy"

    def test_reason_overwritten_by_new_error(self, reporter, store, ipoib_network):
        ipoib_network["status"] = {"state": "notReady", "reason": "old problem"}

        reporter.update_status(ipoib_network, make_results("notReady"), SyncError("new problem"))

        assert store.status_updates[-1]["status"]["reason"] == "new problem"

    def test_resource_status_is_mutated(self, reporter, ipoib_network):
        reporter.update_status(ipoib_network, make_results("error"), SyncError("bad ipam"))

        assert ipoib_network["status"] == {"state": "error", "reason": "bad ipam"}

    def test_empty_results_report_not_ready(self, reporter, store, ipoib_network):
        reporter.update_status(ipoib_network, make_results(), None)

        assert store.status_updates[-1]["status"]["state"] == "notReady"


class TestAttachmentRef:
    """attachmentRef is set only for ready resources with a readable attachment."""

    def test_set_when_ready_and_found(self, reporter, store, ipoib_network, attachment):
        store.put(NETWORK_ATTACHMENT_DEFINITION, attachment)

        reporter.update_status(ipoib_network, make_results("ready"), None)

        assert store.status_updates[-1]["status"]["attachmentRef"] == ATTACHMENT_REF

    def test_not_set_when_not_ready_even_if_attachment_exists(self, reporter, store, ipoib_network, attachment):
        store.put(NETWORK_ATTACHMENT_DEFINITION, attachment)

        reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert "attachmentRef" not in store.status_updates[-1]["status"]

    def test_stale_ref_removed_when_not_ready(self, reporter, store, ipoib_network):
        ipoib_network["status"] = {"state": "ready", "attachmentRef": ATTACHMENT_REF}

        reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert "attachmentRef" not in store.status_updates[-1]["status"]

    def test_default_network_namespace(self, reporter, store, ipoib_network, attachment):
        del ipoib_network["spec"]["networkNamespace"]
        attachment["metadata"]["namespace"] = "default"
        store.put(NETWORK_ATTACHMENT_DEFINITION, attachment)

        reporter.update_status(ipoib_network, make_results("ready"), None)

        assert store.status_updates[-1]["status"]["attachmentRef"].startswith(
            "k8s.cni.cncf.io/v1/namespaces/default/"
        )

    def test_missing_attachment_is_soft_error(self, reporter, store, ipoib_network):
        with pytest.raises(NotFoundError):
            reporter.update_status(ipoib_network, make_results("ready"), None)

        # Status was still written before the lookup error surfaced
        assert store.status_updates[-1]["status"] == {"state": "ready"}


class TestPersistence:
    """Status write failures."""

    def test_persist_error_overrides_lookup_error(self, reporter, store, ipoib_network):
        store.get_errors[ATTACHMENT_KEY] = ApiException(status=500)
        persist_error = ConflictError("ipoibnetworks/net-a was modified concurrently")
        store.update_status_error = persist_error

        with pytest.raises(ConflictError) as exc_info:
            reporter.update_status(ipoib_network, make_results("ready"), SyncError("sync error"))

        assert exc_info.value is persist_error

    def test_persist_error_raised_for_not_ready(self, reporter, store, ipoib_network):
        persist_error = ApiException(status=500, reason="Internal Server Error")
        store.update_status_error = persist_error

        with pytest.raises(ApiException) as exc_info:
            reporter.update_status(ipoib_network, make_results("notReady"), SyncError("device busy"))

        assert exc_info.value is persist_error

    def test_write_carries_resource_version(self, reporter, store, ipoib_network):
        reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert store.status_updates[-1]["metadata"]["resourceVersion"] == "100"


class TestStateChangedEvent:
    """StateChanged events."""

    def test_emitted_on_transition(self, reporter, store, ipoib_network):
        ipoib_network["status"] = {"state": "notReady"}

        reporter.update_status(ipoib_network, make_results("error"), None)

        assert store.event_reasons() == ["StateChanged"]
        assert store.events[0]["message"] == "State changed from notReady to error"

    def test_not_emitted_without_transition(self, reporter, store, ipoib_network):
        ipoib_network["status"] = {"state": "notReady"}

        reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert store.events == []

    def test_not_emitted_when_write_fails(self, reporter, store, ipoib_network):
        store.update_status_error = ConflictError("conflict")

        with pytest.raises(ConflictError):
            reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert store.events == []

    def test_rejected_event_does_not_fail_the_write(self, reporter, store, ipoib_network):
        store.create_event_error = ApiException(status=403, reason="Forbidden")

        reporter.update_status(ipoib_network, make_results("notReady"), None)

        assert store.status_updates[-1]["status"]["state"] == "notReady"
        assert store.events == []
