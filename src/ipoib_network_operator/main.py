"""Main entry point for the IPoIB Network Operator."""

from __future__ import annotations

import logging
import sys
from typing import Any

import kopf

from . import logging as structured_logging
from .config import OperatorConfig
from .constants import KIND_IPOIB_NETWORK
from .controller import Controller
from .exceptions import SynchronizerInitError
from .handlers.ipoib_network import IPoIBNetworkReconciler
from .handlers.watches import register_watches
from .health import start_health_server
from .models import ipoib_network_kind
from .services.kube.base import ClusterStore
from .services.kube.client import create_store
from .state import new_state_manager
from .tracing import initialize_tracing
from .workqueue import WorkQueue

logger = logging.getLogger(__name__)


def setup_controller(
    registry: kopf.OperatorRegistry,
    config: OperatorConfig,
    store: ClusterStore,
) -> Controller:
    """Build the controller and register its watches and lifecycle handlers.

    Raises:
        SynchronizerInitError: If the state synchronizer cannot be created
    """
    resource_kind = ipoib_network_kind(config.cluster_scoped)
    synchronizer = new_state_manager(KIND_IPOIB_NETWORK, store)

    queue = WorkQueue(
        min_retry_delay=config.min_retry_delay,
        max_retry_delay=config.max_retry_delay,
        retry_backoff=config.retry_backoff,
    )
    reconciler = IPoIBNetworkReconciler(store, synchronizer, config, resource_kind)
    controller = Controller(reconciler, queue, workers=config.max_workers, kind=resource_kind.kind)

    register_watches(registry, synchronizer, queue, resource_kind)

    @kopf.on.startup(registry=registry)
    async def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
        """Configure the operator and start the workers."""
        settings.posting.level = logging.WARNING
        settings.networking.request_timeout = config.request_timeout
        settings.execution.max_workers = config.max_workers
        controller.start()

    @kopf.on.cleanup(registry=registry)
    async def shutdown(**_: Any) -> None:
        """Stop the workers."""
        await controller.stop()

    return controller


def main() -> None:
    """Run the operator until interrupted."""
    config = OperatorConfig.from_env()
    structured_logging.setup_structured_logging(config.log_level)
    initialize_tracing()

    store = create_store(config.request_timeout)
    registry = kopf.OperatorRegistry()
    try:
        setup_controller(registry, config, store)
    except SynchronizerInitError as e:
        logger.critical(f"Failed to create state manager: {e}")
        sys.exit(1)

    start_health_server(config.metrics_port)
    kopf.run(registry=registry, standalone=True, clusterwide=True)


if __name__ == "__main__":
    main()
