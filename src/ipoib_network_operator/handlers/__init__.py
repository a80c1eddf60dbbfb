"""Handlers reconciling IPoIBNetwork resources."""

from .ipoib_network import IPoIBNetworkReconciler
from .status import StatusReporter
from .watches import controller_owner, register_watches

__all__ = [
    "IPoIBNetworkReconciler",
    "StatusReporter",
    "controller_owner",
    "register_watches",
]
