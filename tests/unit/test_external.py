"""Tests for the ZeebeCluster lifecycle executor."""

from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from camunda_cloud_operator.controller.external import ExternalCluster
from camunda_cloud_operator.models import Condition, DesiredSpec, ZeebeCluster
from camunda_cloud_operator.services.camunda.client import CamundaCloudClient
from camunda_cloud_operator.services.camunda.models import ClusterStatus, RemoteCluster
from camunda_cloud_operator.tracing import get_tracer
from camunda_cloud_operator.utils.context import ReconcileContext
from camunda_cloud_operator.utils.errors import (
    AuthError,
    ClusterNotFoundError,
    ReconcileCancelled,
    RemoteCallError,
)


def make_cluster(cluster_id: str = "", **spec_overrides) -> ZeebeCluster:
    spec = {
        "region": "us-east",
        "channel_name": "stable",
        "generation_name": "8.2",
        "plan_name": "standard",
    }
    spec.update(spec_overrides)
    cluster = ZeebeCluster(name="orders", uid="uid-1", generation=1, spec=DesiredSpec(**spec))
    cluster.status.cluster_id = cluster_id
    return cluster


def make_remote(**overrides) -> RemoteCluster:
    values = {
        "id": "c-123",
        "name": "orders",
        "plan": "standard",
        "generation": "8.2",
        "channel": "stable",
        "region": "us-east",
    }
    values.update(overrides)
    return RemoteCluster(**values)


@pytest.fixture
def service():
    return Mock()


@pytest.fixture
def external(service):
    return ExternalCluster(service=service, tracer=get_tracer())


@pytest.fixture
def ctx():
    return ReconcileContext()


class TestObserve:
    """Test cases for ExternalCluster.observe."""

    def test_never_created(self, external, service, ctx):
        """Test that a cluster unknown locally and remotely asks for Create."""
        service.get_cluster_by_name.return_value = None
        cluster = make_cluster()

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is False
        assert observation.resource_up_to_date is True
        service.get_cluster_details.assert_not_called()
        assert cluster.condition is None

    def test_healthy_cluster(self, external, service, ctx):
        """Test that a healthy, matching cluster is available and up to date."""
        service.get_cluster_by_name.return_value = make_remote()
        service.get_cluster_details.return_value = ClusterStatus(ready="Healthy", details={"zeebe": "Healthy"})
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is True
        assert observation.resource_up_to_date is True
        assert observation.adopted == {}
        assert cluster.condition == Condition.AVAILABLE
        assert cluster.status.cluster_status.ready == "Healthy"
        service.get_cluster_details.assert_called_once_with("c-123", ctx)

    def test_creating_cluster(self, external, service, ctx):
        """Test that a creating cluster maps to the Creating condition."""
        service.get_cluster_by_name.return_value = make_remote()
        service.get_cluster_details.return_value = ClusterStatus(ready="Creating")
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.resource_up_to_date is True
        assert cluster.condition == Condition.CREATING

    def test_unknown_ready_value(self, external, service, ctx):
        """Test that an unknown remote status is Unavailable and not up to date."""
        service.get_cluster_by_name.return_value = make_remote()
        service.get_cluster_details.return_value = ClusterStatus(ready="Suspended")
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is True
        assert observation.resource_up_to_date is False
        assert cluster.condition == Condition.UNAVAILABLE

    def test_adopts_remote_plan(self, external, service, ctx):
        """Test that a plan changed remotely is adopted without asking for Update."""
        service.get_cluster_by_name.return_value = make_remote(plan="large")
        service.get_cluster_details.return_value = ClusterStatus(ready="Healthy")
        cluster = make_cluster("c-123", plan_name="standard")

        observation = external.observe(cluster, ctx)

        assert cluster.spec.plan_name == "large"
        assert observation.adopted == {"planName": ("standard", "large")}
        assert observation.resource_up_to_date is True
        assert cluster.condition == Condition.AVAILABLE

    def test_adopts_remote_id_when_missing(self, external, service, ctx):
        """Test that a cluster found by name records the remote id."""
        service.get_cluster_by_name.return_value = make_remote(id="c-999")
        service.get_cluster_details.return_value = ClusterStatus(ready="Healthy")
        cluster = make_cluster("")

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is True
        assert cluster.status.cluster_id == "c-999"
        service.get_cluster_details.assert_called_once_with("c-999", ctx)

    def test_keeps_recorded_id_on_mismatch(self, external, service, ctx):
        """Test that a recorded id is not replaced by a different remote id."""
        service.get_cluster_by_name.return_value = make_remote(id="c-999")
        service.get_cluster_details.return_value = ClusterStatus(ready="Healthy")
        cluster = make_cluster("c-123")

        external.observe(cluster, ctx)

        assert cluster.status.cluster_id == "c-123"
        service.get_cluster_details.assert_called_once_with("c-123", ctx)

    def test_recorded_id_without_name_match(self, external, service, ctx):
        """Test that a recorded id is used for details when the name lookup misses."""
        service.get_cluster_by_name.return_value = None
        service.get_cluster_details.return_value = ClusterStatus(ready="Healthy")
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is True
        assert observation.adopted == {}
        service.get_cluster_details.assert_called_once_with("c-123", ctx)

    @pytest.mark.parametrize(
        "error",
        [
            RemoteCallError("get_cluster_details", "HTTP 500", 500),
            ClusterNotFoundError("get_cluster_details", "c-123"),
            AuthError("get_cluster_details: client is not logged in"),
        ],
    )
    def test_detail_fetch_failure(self, external, service, ctx, error):
        """Test that a failed detail fetch reports existence with an Unavailable condition."""
        service.get_cluster_by_name.return_value = make_remote()
        service.get_cluster_details.side_effect = error
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.resource_exists is True
        assert observation.resource_up_to_date is False
        assert cluster.condition == Condition.UNAVAILABLE

    def test_detail_fetch_failure_keeps_adoptions(self, external, service, ctx):
        """Test that fields adopted before a failed detail fetch are still reported."""
        service.get_cluster_by_name.return_value = make_remote(region="eu-west")
        service.get_cluster_details.side_effect = RemoteCallError("get_cluster_details", "HTTP 502", 502)
        cluster = make_cluster("c-123")

        observation = external.observe(cluster, ctx)

        assert observation.adopted == {"region": ("us-east", "eu-west")}
        assert cluster.spec.region == "eu-west"

    def test_detail_body_not_json(self, ctx):
        """Test that a detail page that is not JSON reports Unavailable instead of raising."""

        def console(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/oauth/token":
                return httpx.Response(200, json={"access_token": "tok-1"})
            if request.url.path == "/clusters":
                return httpx.Response(200, json=[{"uuid": "c-123", "name": "orders", "region": {"name": "us-east"}}])
            return httpx.Response(200, text="<html>gateway</html>")

        cc_client = CamundaCloudClient(
            "https://api.example.test",
            "https://login.example.test/oauth/token",
            "api.example.test",
            transport=httpx.MockTransport(console),
        )
        assert cc_client.login("id-1", "secret-1")
        cluster = make_cluster("c-123")

        observation = ExternalCluster(service=cc_client, tracer=get_tracer()).observe(cluster, ctx)

        assert observation.resource_exists is True
        assert observation.resource_up_to_date is False
        assert cluster.condition == Condition.UNAVAILABLE

    def test_lookup_failure_propagates(self, external, service, ctx):
        """Test that a failed name lookup is raised to the caller."""
        service.get_cluster_by_name.side_effect = RemoteCallError("get_cluster_by_name", "ConnectError")
        cluster = make_cluster("c-123")

        with pytest.raises(RemoteCallError):
            external.observe(cluster, ctx)

    def test_cancellation_propagates(self, external, service, ctx):
        """Test that a cancelled pass is not downgraded."""
        service.get_cluster_by_name.side_effect = ReconcileCancelled("get_cluster_by_name cancelled")

        with pytest.raises(ReconcileCancelled):
            external.observe(make_cluster("c-123"), ctx)


class TestCreate:
    """Test cases for ExternalCluster.create."""

    def test_create_records_id(self, external, service, ctx):
        """Test that Create passes the declared names and records the new id."""
        service.create_cluster.return_value = "c-123"
        cluster = make_cluster()

        external.create(cluster, ctx)

        service.create_cluster.assert_called_once_with(
            "orders", "standard", "stable", "8.2", "us-east", ctx
        )
        assert cluster.status.cluster_id == "c-123"
        assert cluster.condition == Condition.CREATING

    def test_create_failure_leaves_id_empty(self, external, service, ctx):
        """Test that a failed Create propagates and records nothing."""
        service.create_cluster.side_effect = RemoteCallError("create_cluster", "HTTP 500", 500)
        cluster = make_cluster()

        with pytest.raises(RemoteCallError):
            external.create(cluster, ctx)

        assert cluster.status.cluster_id == ""
        assert cluster.condition is None

    def test_create_unknown_plan(self, external, service, ctx):
        """Test that a parameter resolution failure propagates."""
        service.create_cluster.side_effect = RemoteCallError("create_cluster", "unknown plan 'huge'")
        cluster = make_cluster(plan_name="huge")

        with pytest.raises(RemoteCallError, match="unknown plan 'huge'"):
            external.create(cluster, ctx)


class TestUpdate:
    """Test cases for ExternalCluster.update."""

    def test_update_is_noop(self, external, service, ctx):
        """Test that Update makes no remote call."""
        cluster = make_cluster("c-123")

        external.update(cluster, ctx)

        assert service.method_calls == []
        assert cluster.status.cluster_id == "c-123"


class TestDelete:
    """Test cases for ExternalCluster.delete."""

    def test_delete_by_recorded_id(self, external, service, ctx):
        """Test that Delete removes the recorded cluster."""
        service.delete_cluster.return_value = True
        cluster = make_cluster("c-123")

        deletion = external.delete(cluster, ctx)

        assert deletion.deleted is True
        assert deletion.note == "cluster c-123 deleted"
        service.delete_cluster.assert_called_once_with("c-123", ctx)
        service.get_cluster_by_name.assert_not_called()

    def test_delete_twice(self, external, service, ctx):
        """Test that a second Delete of the same cluster succeeds."""
        service.delete_cluster.side_effect = [True, ClusterNotFoundError("delete_cluster", "c-123")]
        cluster = make_cluster("c-123")

        first = external.delete(cluster, ctx)
        second = external.delete(cluster, ctx)

        assert first.deleted is True
        assert second.deleted is True
        assert second.note == "cluster c-123 was already deleted"

    def test_delete_looks_up_by_name(self, external, service, ctx):
        """Test that an unrecorded id is resolved by name before deleting."""
        service.get_cluster_by_name.return_value = make_remote(id="c-555")
        cluster = make_cluster("")

        deletion = external.delete(cluster, ctx)

        assert deletion.deleted is True
        service.delete_cluster.assert_called_once_with("c-555", ctx)

    def test_delete_nothing_recorded(self, external, service, ctx):
        """Test that a cluster never created is deleted without a remote delete call."""
        service.get_cluster_by_name.return_value = None
        cluster = make_cluster("")

        deletion = external.delete(cluster, ctx)

        assert deletion.deleted is True
        assert "nothing to delete" in deletion.note
        service.delete_cluster.assert_not_called()

    def test_delete_failure_propagates(self, external, service, ctx):
        """Test that failures other than not-found are raised."""
        service.delete_cluster.side_effect = RemoteCallError("delete_cluster", "HTTP 500", 500)

        with pytest.raises(RemoteCallError):
            external.delete(make_cluster("c-123"), ctx)

    def test_close(self, external, service):
        """Test that close releases the session."""
        external.close()

        service.close.assert_called_once()
