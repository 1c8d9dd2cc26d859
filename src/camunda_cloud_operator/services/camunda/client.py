"""Camunda Cloud console API client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ... import metrics
from ...utils.context import ReconcileContext
from ...utils.errors import AuthError, ClusterNotFoundError, RemoteCallError
from .models import ClusterParameters, ClusterStatus, RemoteCluster

logger = logging.getLogger(__name__)


class CamundaCloudClient:
    """Camunda Cloud cluster management client.

    A client is bound to one login: ``login`` stores the access token and every
    later call is authenticated with it.
    """

    def __init__(
        self,
        api_url: str,
        auth_url: str,
        audience: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Console API base URL
            auth_url: OAuth token endpoint
            audience: OAuth audience for the console API
            timeout: Default per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.auth_url = auth_url
        self.audience = audience
        self.timeout = timeout
        self._token: str | None = None
        self._client = httpx.Client(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def _timeout(self, ctx: ReconcileContext | None) -> float:
        return ctx.timeout_for(self.timeout) if ctx is not None else self.timeout

    @staticmethod
    def _decode(response: httpx.Response, operation: str, expected: type = dict) -> Any:
        """Decode a JSON body, raising RemoteCallError unless it is of the expected type."""
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{operation} returned a body that is not JSON")
            raise RemoteCallError(operation, "malformed response") from e
        if not isinstance(data, expected):
            logger.error(f"{operation} returned {type(data).__name__}, expected {expected.__name__}")
            raise RemoteCallError(operation, "malformed response")
        return data

    def login(self, client_id: str, client_secret: str, ctx: ReconcileContext | None = None) -> bool:
        """Exchange client credentials for an access token.

        Returns:
            True when the token was issued, False when the credentials were rejected

        Raises:
            RemoteCallError: If the token endpoint could not be reached
        """
        if ctx is not None:
            ctx.check("login")

        start_time = time.time()
        try:
            response = self._client.post(
                self.auth_url,
                json={
                    "grant_type": "client_credentials",
                    "audience": self.audience,
                    "client_id": client_id,
                    "client_secret": client_secret,
                },
                timeout=self._timeout(ctx),
            )
        except httpx.HTTPError as e:
            metrics.api_call_total.labels(api_type="camunda", operation="login", result="error").inc()
            logger.error(f"Login request failed: {type(e).__name__}")
            raise RemoteCallError("login", type(e).__name__) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="camunda", operation="login").observe(duration)

        if response.status_code in (400, 401, 403):
            metrics.api_call_total.labels(api_type="camunda", operation="login", result="rejected").inc()
            return False
        if response.is_error:
            metrics.api_call_total.labels(api_type="camunda", operation="login", result="error").inc()
            raise RemoteCallError("login", f"HTTP {response.status_code}", response.status_code)

        token = self._decode(response, "login").get("access_token")
        if not token:
            metrics.api_call_total.labels(api_type="camunda", operation="login", result="rejected").inc()
            return False

        self._token = token
        self._client.headers["Authorization"] = f"Bearer {token}"
        metrics.api_call_total.labels(api_type="camunda", operation="login", result="success").inc()
        return True

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        ctx: ReconcileContext | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send an authenticated request.

        404 responses are returned to the caller; every other failure raises.
        """
        if ctx is not None:
            ctx.check(operation)
        if not self.authenticated:
            raise AuthError(f"{operation}: client is not logged in")

        start_time = time.time()
        try:
            response = self._client.request(method, path, timeout=self._timeout(ctx), **kwargs)
        except httpx.HTTPError as e:
            metrics.api_call_total.labels(api_type="camunda", operation=operation, result="error").inc()
            logger.error(f"{operation} request failed: {type(e).__name__}")
            raise RemoteCallError(operation, type(e).__name__) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="camunda", operation=operation).observe(duration)

        if response.is_error and response.status_code != 404:
            metrics.api_call_total.labels(api_type="camunda", operation=operation, result="error").inc()
            raise RemoteCallError(operation, f"HTTP {response.status_code}", response.status_code)

        result = "not_found" if response.status_code == 404 else "success"
        metrics.api_call_total.labels(api_type="camunda", operation=operation, result=result).inc()
        return response

    def get_cluster_by_name(self, name: str, ctx: ReconcileContext | None = None) -> RemoteCluster | None:
        """Look up a cluster by name."""
        response = self._request("GET", "/clusters", "get_cluster_by_name", ctx)
        if response.status_code == 404:
            return None
        for item in self._decode(response, "get_cluster_by_name", list):
            if not isinstance(item, dict):
                raise RemoteCallError("get_cluster_by_name", "malformed response")
            if item.get("name") == name:
                return RemoteCluster.from_api(item)
        return None

    def get_cluster_details(self, cluster_id: str, ctx: ReconcileContext | None = None) -> ClusterStatus:
        """Fetch the detailed status of a cluster.

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        response = self._request("GET", f"/clusters/{cluster_id}", "get_cluster_details", ctx)
        if response.status_code == 404:
            raise ClusterNotFoundError("get_cluster_details", cluster_id)
        status = self._decode(response, "get_cluster_details").get("status")
        if status is not None and not isinstance(status, dict):
            raise RemoteCallError("get_cluster_details", "malformed response")
        return ClusterStatus.from_api(status)

    def get_cluster_parameters(self, ctx: ReconcileContext | None = None) -> ClusterParameters:
        """Fetch the plans, channels, generations and regions the API accepts."""
        response = self._request("GET", "/clusters/parameters", "get_cluster_parameters", ctx)
        if response.status_code == 404:
            raise RemoteCallError("get_cluster_parameters", "HTTP 404", 404)
        data = self._decode(response, "get_cluster_parameters")
        try:
            return ClusterParameters.from_api(data)
        except (AttributeError, TypeError) as e:
            raise RemoteCallError("get_cluster_parameters", "malformed response") from e

    def create_cluster(
        self,
        name: str,
        plan_name: str,
        channel_name: str,
        generation_name: str,
        region: str,
        ctx: ReconcileContext | None = None,
    ) -> str:
        """Create a cluster from parameter names and return its id."""
        params = self.get_cluster_parameters(ctx)

        plan_id = params.plans.get(plan_name)
        channel_id = params.channels.get(channel_name)
        generation_id = params.generations.get(channel_name, {}).get(generation_name)
        region_id = params.regions.get(region)
        unknown = [
            f"{label} '{value}'"
            for label, value, resolved in (
                ("plan", plan_name, plan_id),
                ("channel", channel_name, channel_id),
                ("generation", generation_name, generation_id),
                ("region", region, region_id),
            )
            if not resolved
        ]
        if unknown:
            raise RemoteCallError("create_cluster", "unknown " + ", ".join(unknown))

        response = self._request(
            "POST",
            "/clusters",
            "create_cluster",
            ctx,
            json={
                "name": name,
                "planTypeId": plan_id,
                "channelId": channel_id,
                "generationId": generation_id,
                "regionId": region_id,
            },
        )
        if response.status_code == 404:
            raise RemoteCallError("create_cluster", "HTTP 404", 404)

        cluster_id = self._decode(response, "create_cluster").get("clusterId")
        if not cluster_id:
            raise RemoteCallError("create_cluster", "response did not contain a cluster id")
        logger.info(f"Created cluster {name} with id {cluster_id}")
        return cluster_id

    def delete_cluster(self, cluster_id: str, ctx: ReconcileContext | None = None) -> bool:
        """Delete a cluster.

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        response = self._request("DELETE", f"/clusters/{cluster_id}", "delete_cluster", ctx)
        if response.status_code == 404:
            raise ClusterNotFoundError("delete_cluster", cluster_id)
        logger.info(f"Deleted cluster {cluster_id}")
        return True
