"""Types shared by the state synchronizer and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..constants import STATE_NOT_READY
from ..models import ResourceKind

# Extra information a state may need beyond the resource itself
InfoCatalog = Optional[dict[str, Any]]


@dataclass
class StateResult:
    """Sync status of a single managed component."""

    state_name: str
    status: str
    error: Exception | None = None


@dataclass
class SyncResults:
    """Outcome of one synchronizer pass.

    ``states_status`` holds one entry per managed component in sync order.
    The first entry describes the resource's own component.
    """

    status: str = STATE_NOT_READY
    states_status: list[StateResult] = field(default_factory=list)

    @property
    def primary_status(self) -> str:
        if not self.states_status:
            return STATE_NOT_READY
        return self.states_status[0].status


class State(Protocol):
    """A single managed component of an IPoIBNetwork."""

    name: str
    description: str

    def sync(self, resource: dict[str, Any], info_catalog: InfoCatalog) -> tuple[str, Exception | None]:
        """Converge the component and report its status and any error."""
        ...

    def get_watch_sources(self) -> list[ResourceKind]:
        """Kinds whose changes affect this component."""
        ...


class StateSynchronizer(Protocol):
    """Performs desired-vs-actual convergence for a resource."""

    def sync_state(self, resource: dict[str, Any], info_catalog: InfoCatalog) -> tuple[SyncResults, Exception | None]:
        """Converge all components.

        May return an error together with a non-terminal result.
        """
        ...

    def get_watch_sources(self) -> list[ResourceKind]:
        """Kinds of dependent objects that should trigger reconciliation."""
        ...
