"""Exception hierarchy for the IPoIB Network Operator."""

from __future__ import annotations


class OperatorError(Exception):
    """Base class for operator errors."""


class StoreError(OperatorError):
    """Cluster store request failed with a status the controller acts on."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NotFoundError(StoreError):
    """Requested object does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status=404)


class ConflictError(StoreError):
    """Write rejected because the object changed since it was read."""

    def __init__(self, message: str):
        super().__init__(message, status=409)


class SyncError(OperatorError):
    """A state failed to converge.

    Carries the name of the state that failed so it can be reported.
    """

    def __init__(self, message: str, state_name: str | None = None):
        super().__init__(message)
        self.state_name = state_name


class SynchronizerInitError(OperatorError):
    """State synchronizer could not be constructed."""
