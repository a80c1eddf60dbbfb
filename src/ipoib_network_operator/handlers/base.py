"""Base handler class with logging and metrics shared by controller handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..constants import CONTROLLER_NAME
from ..logging import log_resource_event
from ..models import ResourceIdentity
from ..utils.errors import sanitize_exception

_T = TypeVar("_T")


class BaseHandler:
    """Base class for resource handlers with common functionality."""

    def __init__(self, kind: str):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "IPoIBNetwork")
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _log(
        self,
        level: int,
        identity: ResourceIdentity,
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=identity.name,
            namespace=identity.namespace,
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        identity: ResourceIdentity,
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message.

        Args:
            identity: Identity of the resource
            message: Log message
            event: Event type (default: "info")
            reason: Reason for the event (default: "Info")
            **kwargs: Additional fields to include in the log
        """
        self._log(logging.INFO, identity, message, event, reason, **kwargs)

    def log_warning(
        self,
        identity: ResourceIdentity,
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, identity, message, event, reason, **kwargs)

    def log_error(
        self,
        identity: ResourceIdentity,
        message: str,
        error: BaseException | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            identity: Identity of the resource
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()

        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__

        self._log(logging.ERROR, identity, message, event, reason, **log_data)

    def reconcile_with_metrics(
        self,
        identity: ResourceIdentity,
        reconcile_fn: Callable[[], _T],
    ) -> _T:
        """Execute reconciliation with metrics and error logging.

        Exceptions are logged, counted and re-raised.

        Args:
            identity: Identity of the resource being reconciled
            reconcile_fn: Function to execute for reconciliation

        Returns:
            Whatever ``reconcile_fn`` returns
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            return reconcile_fn()
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            self.log_error(identity, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)
