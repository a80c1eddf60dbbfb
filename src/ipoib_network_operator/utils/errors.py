"""Redaction of credentials from error text before it is logged.

Kubernetes client errors can echo request headers or kubeconfig fragments.
Status ``reason`` fields keep the raw message; only log lines are redacted.
"""

import re

# Credentials in headers and kubeconfig data; group 1 is kept
_CREDENTIAL_PATTERNS = [
    re.compile(r"(authorization[:\s]+bearer)\s+[A-Za-z0-9\-_\.=]+", re.IGNORECASE),
    re.compile(r"(bearer)\s+[A-Za-z0-9\-_\.=]{20,}", re.IGNORECASE),
    re.compile(r"(client[_\-\s]?key[_\-\s]?data[:\s]+)[A-Za-z0-9/+=]+", re.IGNORECASE),
    re.compile(r"(client[_\-\s]?certificate[_\-\s]?data[:\s]+)[A-Za-z0-9/+=]+", re.IGNORECASE),
]

# "<field>: value" and "<field>=value" pairs
SENSITIVE_FIELDS = ("password", "secret", "token", "credentials")
_FIELD_PATTERN = re.compile(
    rf"({'|'.join(SENSITIVE_FIELDS)})([=:]\s*|\s+)([^\s,;\)]+)",
    re.IGNORECASE,
)


def sanitize_error_message(message: str) -> str:
    """Return ``message`` with credentials replaced by ``[REDACTED]``."""
    for pattern in _CREDENTIAL_PATTERNS:
        message = pattern.sub(r"\1 [REDACTED]", message)
    return _FIELD_PATTERN.sub(r"\1: [REDACTED]", message)


def sanitize_exception(error: BaseException) -> str:
    """Redacted ``str(error)``."""
    return sanitize_error_message(str(error))
