"""Kubernetes implementation of the cluster object store."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import FIELD_MANAGER
from ...exceptions import ConflictError, NotFoundError
from ...models import ResourceKind
from ...utils.rate_limit import is_rate_limit_error, rate_limit_k8s

logger = logging.getLogger(__name__)


class KubernetesStore:
    """Cluster store backed by the Kubernetes CustomObjectsApi.

    404 and 409 responses are raised as ``NotFoundError`` and ``ConflictError``.
    Any other ``ApiException`` propagates unchanged so the caller's retry
    policy applies.
    """

    def __init__(
        self,
        api: client.CustomObjectsApi,
        request_timeout: float = 30.0,
        core_api: client.CoreV1Api | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            api: Kubernetes CustomObjectsApi instance
            request_timeout: Timeout in seconds applied to every API request
            core_api: CoreV1Api used for events, sharing ``api``'s client by default
        """
        self.api = api
        self.core_api = core_api or client.CoreV1Api(api.api_client)
        self.request_timeout = request_timeout

    def _call(self, operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            result = rate_limit_k8s(func)(_request_timeout=self.request_timeout, **kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            if is_rate_limit_error(e):
                metrics.rate_limit_hits_total.labels(api_type="k8s").inc()
            target = f"{kwargs.get('plural', 'events')}/{kwargs.get('name', '')}"
            if e.status == 404:
                raise NotFoundError(f"{target} not found") from e
            if e.status == 409:
                raise ConflictError(f"{target} was modified concurrently: {e.reason}") from e
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def get(self, kind: ResourceKind, name: str, namespace: str = "") -> dict[str, Any]:
        if kind.namespaced:
            return self._call(
                f"get_{kind.plural}",
                self.api.get_namespaced_custom_object,
                group=kind.group,
                version=kind.version,
                namespace=namespace,
                plural=kind.plural,
                name=name,
            )
        return self._call(
            f"get_{kind.plural}",
            self.api.get_cluster_custom_object,
            group=kind.group,
            version=kind.version,
            plural=kind.plural,
            name=name,
        )

    def create(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        meta = body.get("metadata", {})
        if kind.namespaced:
            return self._call(
                f"create_{kind.plural}",
                self.api.create_namespaced_custom_object,
                group=kind.group,
                version=kind.version,
                namespace=meta.get("namespace", ""),
                plural=kind.plural,
                body=body,
                field_manager=FIELD_MANAGER,
            )
        return self._call(
            f"create_{kind.plural}",
            self.api.create_cluster_custom_object,
            group=kind.group,
            version=kind.version,
            plural=kind.plural,
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def replace(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        meta = body.get("metadata", {})
        if kind.namespaced:
            return self._call(
                f"replace_{kind.plural}",
                self.api.replace_namespaced_custom_object,
                group=kind.group,
                version=kind.version,
                namespace=meta.get("namespace", ""),
                plural=kind.plural,
                name=meta.get("name", ""),
                body=body,
                field_manager=FIELD_MANAGER,
            )
        return self._call(
            f"replace_{kind.plural}",
            self.api.replace_cluster_custom_object,
            group=kind.group,
            version=kind.version,
            plural=kind.plural,
            name=meta.get("name", ""),
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def update_status(self, kind: ResourceKind, body: dict[str, Any]) -> dict[str, Any]:
        meta = body.get("metadata", {})
        if kind.namespaced:
            return self._call(
                f"update_status_{kind.plural}",
                self.api.replace_namespaced_custom_object_status,
                group=kind.group,
                version=kind.version,
                namespace=meta.get("namespace", ""),
                plural=kind.plural,
                name=meta.get("name", ""),
                body=body,
                field_manager=FIELD_MANAGER,
            )
        return self._call(
            f"update_status_{kind.plural}",
            self.api.replace_cluster_custom_object_status,
            group=kind.group,
            version=kind.version,
            plural=kind.plural,
            name=meta.get("name", ""),
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def create_event(self, body: dict[str, Any]) -> dict[str, Any]:
        return self._call(
            "create_events",
            self.core_api.create_namespaced_event,
            namespace=body.get("metadata", {}).get("namespace", ""),
            body=body,
            field_manager=FIELD_MANAGER,
        )


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()


def create_store(request_timeout: float = 30.0) -> KubernetesStore:
    """Create a store using in-cluster or kubeconfig credentials."""
    return KubernetesStore(get_k8s_client(), request_timeout=request_timeout)
