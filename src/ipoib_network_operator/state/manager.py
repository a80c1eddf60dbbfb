"""State manager running the states of a custom resource in order."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .. import metrics
from ..constants import KIND_IPOIB_NETWORK, STATE_IGNORE, STATE_NOT_READY, STATE_READY
from ..exceptions import SyncError, SynchronizerInitError
from ..models import ResourceKind
from ..services.kube.base import ClusterStore
from ..tracing import trace_span
from .attachment import NetworkAttachmentState
from .types import InfoCatalog, State, StateResult, SyncResults

logger = logging.getLogger(__name__)


class StateManager:
    """Syncs an ordered list of states.

    Syncing stops at the first state that fails or is not done yet. The
    overall status is ready only when every state is ready or ignored.
    """

    def __init__(self, states: list[State]) -> None:
        if not states:
            raise SynchronizerInitError("state manager requires at least one state")
        self.states = states

    def sync_state(self, resource: dict[str, Any], info_catalog: InfoCatalog) -> tuple[SyncResults, Exception | None]:
        results = SyncResults(status=STATE_NOT_READY)

        for state in self.states:
            with trace_span("sync_state", attributes={"state.name": state.name}):
                status, err = state.sync(resource, info_catalog)
            metrics.state_sync_total.labels(state=state.name, status=status).inc()
            results.states_status.append(StateResult(state_name=state.name, status=status, error=err))

            if err is not None:
                return results, SyncError(str(err), state_name=state.name)
            if status not in (STATE_READY, STATE_IGNORE):
                logger.debug(f"State {state.name} is {status}, not syncing further states")
                return results, None

        results.status = STATE_READY
        return results, None

    def get_watch_sources(self) -> list[ResourceKind]:
        sources: list[ResourceKind] = []
        for state in self.states:
            for kind in state.get_watch_sources():
                if kind not in sources:
                    sources.append(kind)
        return sources


_STATE_FACTORIES: dict[str, Callable[[ClusterStore], list[State]]] = {
    KIND_IPOIB_NETWORK: lambda store: [NetworkAttachmentState(store)],
}


def new_state_manager(crd_kind: str, store: ClusterStore) -> StateManager:
    """Create the state manager for a custom resource kind.

    Raises:
        SynchronizerInitError: If no states are known for ``crd_kind``
    """
    factory = _STATE_FACTORIES.get(crd_kind)
    if factory is None:
        raise SynchronizerInitError(f"no states registered for kind {crd_kind}")
    return StateManager(factory(store))
