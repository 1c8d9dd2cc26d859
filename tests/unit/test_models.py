"""Tests for resource and API payload models."""

from __future__ import annotations

import pytest

from camunda_cloud_operator.config import OperatorConfig
from camunda_cloud_operator.models import DesiredSpec, ZeebeCluster
from camunda_cloud_operator.services.camunda.models import ClusterParameters, ClusterStatus, RemoteCluster
from camunda_cloud_operator.utils.errors import TypeMismatchError


def make_body(**overrides):
    body = {
        "apiVersion": "cc.camunda.io/v1alpha1",
        "kind": "ZeebeCluster",
        "metadata": {"name": "orders", "uid": "uid-1", "generation": 2},
        "spec": {
            "region": "us-east",
            "channelName": "stable",
            "generationName": "8.2",
            "planName": "standard",
            "providerConfigRef": {"name": "team-a"},
        },
        "status": {
            "clusterId": "c-123",
            "clusterStatus": {"ready": "Healthy", "zeebeStatus": "Healthy"},
            "conditions": [{"type": "Ready", "status": "True"}],
        },
    }
    body.update(overrides)
    return body


class TestZeebeCluster:
    """Test cases for ZeebeCluster.from_body."""

    def test_from_body(self):
        """Test parsing a complete resource."""
        cluster = ZeebeCluster.from_body(make_body())

        assert cluster.name == "orders"
        assert cluster.generation == 2
        assert cluster.provider_config_name == "team-a"
        assert cluster.spec == DesiredSpec(
            region="us-east", channel_name="stable", generation_name="8.2", plan_name="standard"
        )
        assert cluster.status.cluster_id == "c-123"
        assert cluster.status.cluster_status.ready == "Healthy"
        assert cluster.conditions == [{"type": "Ready", "status": "True"}]
        assert cluster.condition is None

    def test_from_body_defaults(self):
        """Test that a fresh resource has empty status and the default ProviderConfig."""
        cluster = ZeebeCluster.from_body(make_body(spec={"region": "us-east"}, status=None))

        assert cluster.provider_config_name == "default"
        assert cluster.spec.plan_name == ""
        assert cluster.status.cluster_id == ""
        assert cluster.status.cluster_status.ready == ""
        assert cluster.conditions == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"kind": "ProviderConfig"},
            {"apiVersion": "cc.camunda.io/v1beta1"},
            {"apiVersion": None, "kind": None},
        ],
    )
    def test_type_mismatch(self, overrides):
        """Test that other resources are rejected."""
        with pytest.raises(TypeMismatchError):
            ZeebeCluster.from_body(make_body(**overrides))

    def test_status_round_trip_keeps_details(self):
        """Test that the status mirror keeps remote fields verbatim."""
        cluster = ZeebeCluster.from_body(make_body())

        assert cluster.status.to_dict() == {
            "clusterId": "c-123",
            "clusterStatus": {"ready": "Healthy", "zeebeStatus": "Healthy"},
        }

    def test_spec_to_dict(self):
        """Test that the spec serializes to CRD field names."""
        spec = DesiredSpec(region="us-east", channel_name="stable", generation_name="8.2", plan_name="large")

        assert spec.to_dict() == {
            "planName": "large",
            "generationName": "8.2",
            "channelName": "stable",
            "region": "us-east",
        }


class TestApiModels:
    """Test cases for console API payload models."""

    def test_cluster_status_from_api(self):
        """Test that the ready value is split from the detail fields."""
        status = ClusterStatus.from_api({"ready": "Creating", "operateStatus": "Creating"})

        assert status.ready == "Creating"
        assert status.details == {"operateStatus": "Creating"}

    def test_cluster_status_from_none(self):
        """Test that a missing status is empty."""
        assert ClusterStatus.from_api(None) == ClusterStatus()

    def test_remote_cluster_k8s_context_region(self):
        """Test that the region falls back to k8sContext."""
        remote = RemoteCluster.from_api({"uuid": "c-1", "name": "orders", "k8sContext": {"name": "eu-west"}})

        assert remote.region == "eu-west"
        assert remote.plan == ""

    def test_cluster_parameters(self):
        """Test indexing parameters by name."""
        params = ClusterParameters.from_api(
            {
                "clusterPlanTypes": [{"uuid": "plan-1", "name": "standard"}],
                "channels": [
                    {"uuid": "chan-1", "name": "stable", "allowedGenerations": [{"uuid": "gen-1", "name": "8.2"}]}
                ],
                "regions": [{"uuid": "reg-1", "name": "us-east"}],
            }
        )

        assert params.plans == {"standard": "plan-1"}
        assert params.channels == {"stable": "chan-1"}
        assert params.generations == {"stable": {"8.2": "gen-1"}}
        assert params.regions == {"us-east": "reg-1"}


class TestOperatorConfig:
    """Test cases for OperatorConfig.from_env."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in (
            "LOG_LEVEL",
            "DRIFT_CHECK_INTERVAL_SECONDS",
            "RETRY_DELAY_SECONDS",
            "CC_API_URL",
            "MAX_WORKERS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = OperatorConfig.from_env()

        assert config.log_level == "INFO"
        assert config.drift_check_interval_seconds == 60.0
        assert config.retry_delay_seconds == 30.0
        assert config.max_workers == 4
        assert config.api_url == "https://api.cloud.camunda.io"

    def test_from_env(self, monkeypatch):
        """Test overriding values from the environment."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DRIFT_CHECK_INTERVAL_SECONDS", "15")
        monkeypatch.setenv("CC_API_URL", "https://api.example.test/")
        monkeypatch.setenv("MAX_WORKERS", "8")

        config = OperatorConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.drift_check_interval_seconds == 15.0
        assert config.api_url == "https://api.example.test"
        assert config.max_workers == 8
