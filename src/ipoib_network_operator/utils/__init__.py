"""Utility functions for the IPoIB Network Operator."""

from .context import get_context_dict, get_correlation_id, with_correlation_id
from .errors import sanitize_exception
from .events import EventRecorder
from .rate_limit import is_rate_limit_error, rate_limit_k8s

__all__ = [
    "EventRecorder",
    "sanitize_exception",
    "rate_limit_k8s",
    "is_rate_limit_error",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
]
