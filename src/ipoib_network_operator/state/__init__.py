"""State synchronizer for IPoIBNetwork resources."""

from .attachment import NetworkAttachmentState
from .manager import StateManager, new_state_manager
from .types import InfoCatalog, State, StateResult, StateSynchronizer, SyncResults

__all__ = [
    "InfoCatalog",
    "NetworkAttachmentState",
    "State",
    "StateManager",
    "StateResult",
    "StateSynchronizer",
    "SyncResults",
    "new_state_manager",
]
