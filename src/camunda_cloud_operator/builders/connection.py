"""Build authenticated sessions and lifecycle executors."""

from __future__ import annotations

import logging
from typing import Callable

from kubernetes import client
from opentelemetry import trace

from ..config import OperatorConfig
from ..controller.external import ExternalCluster
from ..models import Credentials, ZeebeCluster
from ..services.camunda.base import ClusterService
from ..services.camunda.client import CamundaCloudClient
from ..utils.context import ReconcileContext
from ..utils.errors import AuthError, RemoteCallError
from .credentials import get_provider_config_secret_ref, resolve_credentials

logger = logging.getLogger(__name__)


def client_factory_from_config(config: OperatorConfig) -> Callable[[], ClusterService]:
    """Return a factory creating unauthenticated Camunda Cloud clients."""

    def factory() -> ClusterService:
        return CamundaCloudClient(
            api_url=config.api_url,
            auth_url=config.auth_url,
            audience=config.audience,
            timeout=config.request_timeout_seconds,
        )

    return factory


class ConnectionFactory:
    """Exchanges credentials for an authenticated session. Never retries."""

    def __init__(self, client_factory: Callable[[], ClusterService]):
        self.client_factory = client_factory

    def connect(self, credentials: Credentials, ctx: ReconcileContext | None = None) -> ClusterService:
        """Log in and return the session bound to the issued token.

        Raises:
            AuthError: If the login is rejected or cannot be performed
        """
        service = self.client_factory()
        try:
            logged_in = service.login(credentials.client_id, credentials.client_secret, ctx)
        except RemoteCallError as e:
            service.close()
            raise AuthError(f"cannot login to Camunda Cloud: {e}") from e
        except BaseException:
            service.close()
            raise

        if not logged_in:
            service.close()
            raise AuthError("cannot login to Camunda Cloud: credentials rejected")

        logger.debug("Logged in to Camunda Cloud")
        return service


class Connector:
    """Produces an ExternalCluster for one reconcile pass.

    Dependencies are injected at construction; nothing is shared between
    passes except these stateless collaborators.
    """

    def __init__(
        self,
        core_api: client.CoreV1Api,
        custom_api: client.CustomObjectsApi,
        connection_factory: ConnectionFactory,
        tracer: trace.Tracer,
    ):
        self.core_api = core_api
        self.custom_api = custom_api
        self.connection_factory = connection_factory
        self.tracer = tracer

    def connect(self, cluster: ZeebeCluster, ctx: ReconcileContext) -> ExternalCluster:
        """Resolve credentials for ``cluster`` and bind an executor to a live session.

        Raises:
            CredentialError: If the ProviderConfig or secret is missing or malformed
            AuthError: If the login is rejected
            RemoteCallError: If the Kubernetes API fails while resolving credentials
        """
        ctx.check("connect")
        try:
            secret_ref = get_provider_config_secret_ref(self.custom_api, cluster.provider_config_name)
            credentials = resolve_credentials(self.core_api, secret_ref)
        except client.exceptions.ApiException as e:
            raise RemoteCallError("resolve_credentials", f"HTTP {e.status}", e.status) from e

        service = self.connection_factory.connect(credentials, ctx)
        return ExternalCluster(service=service, tracer=self.tracer)
