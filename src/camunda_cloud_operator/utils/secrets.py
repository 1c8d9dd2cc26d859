"""Utilities for reading Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii

from kubernetes import client

from .errors import CredentialError, CredentialErrorCause


def get_secret_value(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
) -> str:
    """Get a value from a Kubernetes secret.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret
        key: Key in the secret

    Returns:
        Secret value

    Raises:
        CredentialError: NOT_FOUND if the secret or key is missing,
            DECODE_ERROR if the value is not valid base64/UTF-8
        client.exceptions.ApiException: For any other API failure
    """
    try:
        secret = api.read_namespaced_secret(name=secret_name, namespace=namespace)
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise CredentialError(
                CredentialErrorCause.NOT_FOUND,
                f"Secret '{secret_name}' not found in namespace '{namespace}'",
            ) from e
        raise

    data = secret.data or {}
    if key not in data:
        raise CredentialError(
            CredentialErrorCause.NOT_FOUND,
            f"Key '{key}' not found in secret '{secret_name}'",
        )

    value = data[key]
    try:
        # The API returns base64 strings; some client versions hand back bytes
        if isinstance(value, str):
            return base64.b64decode(value, validate=True).decode("utf-8")
        return value.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            f"Key '{key}' in secret '{secret_name}' is not valid encoded data",
        ) from e
