"""Error taxonomy and sanitization utilities to prevent information leakage."""

from __future__ import annotations

import enum
import re
from typing import Any


class OperatorError(Exception):
    """Base class for all errors raised by the reconciliation core."""


class CredentialErrorCause(str, enum.Enum):
    """Why credentials could not be resolved."""

    NOT_FOUND = "NotFound"
    DECODE_ERROR = "DecodeError"


class CredentialError(OperatorError):
    """Credentials are missing or malformed.

    Not retryable without operator intervention: a missing secret and a
    malformed payload need different fixes, so ``cause`` keeps them apart.
    """

    def __init__(self, cause: CredentialErrorCause, message: str):
        super().__init__(message)
        self.cause = cause


class AuthError(OperatorError):
    """The remote API rejected the login exchange."""


class RemoteCallError(OperatorError):
    """Any transport or API failure talking to the remote cluster API."""

    def __init__(self, operation: str, message: str, status_code: int | None = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.status_code = status_code


class ClusterNotFoundError(RemoteCallError):
    """The remote API reports that the addressed cluster does not exist."""

    def __init__(self, operation: str, cluster_id: str):
        super().__init__(operation, f"cluster {cluster_id} not found", status_code=404)
        self.cluster_id = cluster_id


class TypeMismatchError(OperatorError):
    """A resource of the wrong kind was handed to the controller."""


class ReconcileCancelled(OperatorError):
    """The reconcile pass was cancelled or ran past its deadline."""


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"client[_\s]?id[:=\s]+([A-Za-z0-9\-_~.]+)",
    r"bearer\s+([A-Za-z0-9\-_.=]+)",
    r"access[_\s]?token[\"':=\s]+([A-Za-z0-9\-_.=]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "ccclientid",
    "ccsecretid",
    "client_secret",
    "clientsecret",
    "access_token",
    "password",
    "secret",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(
            pattern,
            lambda m: m.group(0).replace(m.group(1), "[REDACTED]"),
            sanitized,
            flags=re.IGNORECASE,
        )

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[\"']?[:=\s]+[\"']?([^\s,;\)\"'}}]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | {key.lower() for key in (sensitive_keys or set())}
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
