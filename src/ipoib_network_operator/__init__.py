"""Kubernetes operator reconciling IPoIBNetwork resources into network attachments."""

__version__ = "0.1.0"
