"""Base cluster service interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .models import ClusterStatus, RemoteCluster

if TYPE_CHECKING:
    from ...utils.context import ReconcileContext


class ClusterService(Protocol):
    """Protocol defining the remote cluster management operations.

    Every call may raise RemoteCallError for transport or API failures.
    Calls addressing a cluster by id raise ClusterNotFoundError when it is gone.
    """

    def login(self, client_id: str, client_secret: str, ctx: ReconcileContext | None = None) -> bool:
        """Exchange client credentials for an access token."""
        ...

    def get_cluster_by_name(self, name: str, ctx: ReconcileContext | None = None) -> RemoteCluster | None:
        """Look up a cluster by name; None when no cluster matches."""
        ...

    def get_cluster_details(self, cluster_id: str, ctx: ReconcileContext | None = None) -> ClusterStatus:
        """Fetch the detailed status of a cluster."""
        ...

    def create_cluster(
        self,
        name: str,
        plan_name: str,
        channel_name: str,
        generation_name: str,
        region: str,
        ctx: ReconcileContext | None = None,
    ) -> str:
        """Create a cluster and return its remote id."""
        ...

    def delete_cluster(self, cluster_id: str, ctx: ReconcileContext | None = None) -> bool:
        """Delete a cluster."""
        ...

    def close(self) -> None:
        """Release any connection resources held by the session."""
        ...
