"""Resolve Camunda Cloud credentials from ProviderConfig and Secret objects."""

from __future__ import annotations

import json
from typing import Any

from kubernetes import client

from ..constants import (
    API_GROUP,
    API_VERSION,
    CREDENTIALS_CLIENT_ID,
    CREDENTIALS_CLIENT_SECRET,
    CREDENTIALS_SOURCE_SECRET,
    PLURAL_PROVIDER_CONFIGS,
)
from ..models import Credentials, SecretRef
from ..utils.errors import CredentialError, CredentialErrorCause
from ..utils.secrets import get_secret_value


def secret_ref_from_provider_config(provider_config: dict[str, Any]) -> SecretRef:
    """Extract the credentials secret reference from a ProviderConfig body.

    Raises:
        CredentialError: DECODE_ERROR if the credentials block is unusable
    """
    name = (provider_config.get("metadata") or {}).get("name", "unknown")
    credentials = (provider_config.get("spec") or {}).get("credentials") or {}

    source = credentials.get("source", CREDENTIALS_SOURCE_SECRET)
    if source != CREDENTIALS_SOURCE_SECRET:
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            f"ProviderConfig '{name}' uses unsupported credentials source '{source}'",
        )

    secret_ref = credentials.get("secretRef") or {}
    missing = [field for field in ("namespace", "name", "key") if not secret_ref.get(field)]
    if missing:
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            f"ProviderConfig '{name}' secretRef is missing {', '.join(missing)}",
        )

    return SecretRef(
        namespace=secret_ref["namespace"],
        name=secret_ref["name"],
        key=secret_ref["key"],
    )


def get_provider_config_secret_ref(api: client.CustomObjectsApi, name: str) -> SecretRef:
    """Read a cluster-scoped ProviderConfig and return its secret reference.

    Raises:
        CredentialError: NOT_FOUND if the ProviderConfig does not exist
        client.exceptions.ApiException: For any other API failure
    """
    try:
        provider_config = api.get_cluster_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            plural=PLURAL_PROVIDER_CONFIGS,
            name=name,
        )
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise CredentialError(
                CredentialErrorCause.NOT_FOUND,
                f"ProviderConfig '{name}' not found",
            ) from e
        raise
    return secret_ref_from_provider_config(provider_config)


def decode_credentials(payload: str) -> Credentials:
    """Decode the ``{"ccClientId": ..., "ccSecretId": ...}`` payload.

    Raises:
        CredentialError: DECODE_ERROR if the payload is malformed
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            "credentials payload is not valid JSON",
        ) from e

    if not isinstance(data, dict):
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            "credentials payload must be a JSON object",
        )

    client_id = data.get(CREDENTIALS_CLIENT_ID)
    client_secret = data.get(CREDENTIALS_CLIENT_SECRET)
    missing = [
        field
        for field, value in ((CREDENTIALS_CLIENT_ID, client_id), (CREDENTIALS_CLIENT_SECRET, client_secret))
        if not isinstance(value, str) or not value
    ]
    if missing:
        raise CredentialError(
            CredentialErrorCause.DECODE_ERROR,
            f"credentials payload is missing {', '.join(missing)}",
        )

    return Credentials(client_id=client_id, client_secret=client_secret)


def resolve_credentials(api: client.CoreV1Api, secret_ref: SecretRef) -> Credentials:
    """Fetch and decode the credentials a secret reference points at.

    Args:
        api: Kubernetes CoreV1Api client
        secret_ref: Secret holding the JSON credentials payload

    Returns:
        Decoded credentials

    Raises:
        CredentialError: NOT_FOUND when the secret or key is missing,
            DECODE_ERROR when the payload is malformed
    """
    payload = get_secret_value(api, secret_ref.namespace, secret_ref.name, secret_ref.key)
    return decode_credentials(payload)
