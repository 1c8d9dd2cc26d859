"""Handler for ProviderConfig CRD."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import kopf

from ..builders.connection import ConnectionFactory, client_factory_from_config
from ..builders.credentials import resolve_credentials, secret_ref_from_provider_config
from ..config import OperatorConfig
from ..constants import API_GROUP_VERSION, KIND_PROVIDER_CONFIG, KIND_ZEEBE_CLUSTER
from ..tracing import get_tracer, trace_span
from ..utils.conditions import set_auth_valid_condition, set_ready_condition
from ..utils.context import ReconcileContext
from ..utils.errors import AuthError, CredentialError, ReconcileCancelled, sanitize_exception
from .base import BaseHandler
from .shared import get_k8s_clients, list_provider_config_users


class ProviderConfigHandler(BaseHandler):
    """Validates ProviderConfig credentials and guards deletion while in use."""

    def __init__(self, config: OperatorConfig, connection_factory: ConnectionFactory | None = None):
        super().__init__(KIND_PROVIDER_CONFIG, retry_delay=config.retry_delay_seconds)
        self.config = config
        self.connection_factory = connection_factory or ConnectionFactory(client_factory_from_config(config))

    def reconcile(
        self,
        body: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Check that the referenced credentials resolve and log in."""
        meta = body.get("metadata", {})
        name = meta.get("name", "unknown")
        conditions = list(status.get("conditions", []))
        core_api, custom_api = get_k8s_clients()

        with trace_span(get_tracer(), "reconcile_providerconfig", kind=self.kind, attributes={"providerconfig.name": name}):
            ctx = ReconcileContext(timeout=self.config.reconcile_timeout_seconds)
            try:
                credentials = resolve_credentials(core_api, secret_ref_from_provider_config(body))
                service = self.connection_factory.connect(credentials, ctx)
                service.close()
                auth_valid = True
                auth_message = "Authentication successful"
            except CredentialError as e:
                auth_valid = False
                auth_message = f"Cannot get credentials ({e.cause.value}): {sanitize_exception(e)}"
                self.log_error(meta, auth_message, error=e, reason="CredentialsInvalid")
            except (AuthError, ReconcileCancelled) as e:
                auth_valid = False
                auth_message = f"Authentication failed: {sanitize_exception(e)}"
                self.log_error(meta, auth_message, error=e, reason="AuthFailed")

            users = list_provider_config_users(custom_api, name)

        conditions = set_auth_valid_condition(conditions, auth_valid, auth_message)
        conditions = set_ready_condition(
            conditions,
            auth_valid,
            "ProviderConfig is ready" if auth_valid else "ProviderConfig is not ready",
        )
        self.update_resource_status(
            patch,
            meta,
            auth_valid,
            {
                "users": len(users),
                "lastAuthTime": datetime.now(timezone.utc).isoformat() if auth_valid else None,
                "conditions": conditions,
            },
        )

    def delete(self, body: dict[str, Any], patch: kopf.Patch) -> None:
        """Refuse deletion while ZeebeClusters still reference this ProviderConfig.

        Raises:
            kopf.TemporaryError: While the ProviderConfig is in use
        """
        meta = body.get("metadata", {})
        name = meta.get("name", "unknown")
        _, custom_api = get_k8s_clients()

        users = list_provider_config_users(custom_api, name)
        if users:
            message = f"ProviderConfig {name} is still used by {len(users)} {KIND_ZEEBE_CLUSTER}(s)"
            self.log_warning(meta, message, reason="InUse", users=len(users))
            raise kopf.TemporaryError(message, delay=self.retry_delay)

        self.log_info(meta, "ProviderConfig is being deleted", event="deletion", reason="Deletion")
        self.remove_finalizer(meta, patch)


_handler = ProviderConfigHandler(OperatorConfig.from_env())


@kopf.on.create(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
@kopf.on.update(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
@kopf.on.resume(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
def handle_provider_config(
    body: kopf.Body,
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ProviderConfig resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, status, patch))


@kopf.on.delete(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
def handle_provider_config_delete(
    body: kopf.Body,
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ProviderConfig resource deletion."""
    _handler.delete(body, patch)
