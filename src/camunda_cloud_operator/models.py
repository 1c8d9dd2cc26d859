"""Typed views of the resources the operator reconciles."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    API_GROUP_VERSION,
    DEFAULT_PROVIDER_CONFIG,
    KIND_ZEEBE_CLUSTER,
)
from .services.camunda.models import ClusterStatus
from .utils.errors import TypeMismatchError


class Condition(str, enum.Enum):
    """Coarse health signal exposed to the resource owner."""

    AVAILABLE = "Available"
    CREATING = "Creating"
    UNAVAILABLE = "Unavailable"


@dataclass
class Credentials:
    """Camunda Cloud API client credentials. Held in memory only."""

    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True)
class SecretRef:
    """Reference to one key of a namespaced Kubernetes secret."""

    namespace: str
    name: str
    key: str


@dataclass
class DesiredSpec:
    """User-declared target state of a Zeebe cluster."""

    region: str = ""
    channel_name: str = ""
    generation_name: str = ""
    plan_name: str = ""

    # (attribute, CRD field) pairs, in the order they are compared
    FIELDS = (
        ("plan_name", "planName"),
        ("generation_name", "generationName"),
        ("channel_name", "channelName"),
        ("region", "region"),
    )

    @classmethod
    def from_dict(cls, spec: dict[str, Any]) -> DesiredSpec:
        return cls(**{attr: spec.get(key) or "" for attr, key in cls.FIELDS})

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key in self.FIELDS}


@dataclass
class ObservedStatus:
    """Last-known mirror of the remote cluster."""

    cluster_id: str = ""
    cluster_status: ClusterStatus = field(default_factory=ClusterStatus)

    @classmethod
    def from_dict(cls, status: dict[str, Any]) -> ObservedStatus:
        return cls(
            cluster_id=status.get("clusterId") or "",
            cluster_status=ClusterStatus.from_dict(status.get("clusterStatus")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "clusterId": self.cluster_id,
            "clusterStatus": self.cluster_status.to_dict(),
        }


@dataclass
class ZeebeCluster:
    """A ZeebeCluster custom resource, owned by the caller for one pass."""

    name: str
    uid: str = ""
    generation: int = 0
    provider_config_name: str = DEFAULT_PROVIDER_CONFIG
    spec: DesiredSpec = field(default_factory=DesiredSpec)
    status: ObservedStatus = field(default_factory=ObservedStatus)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    condition: Condition | None = None

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> ZeebeCluster:
        """Build a typed resource from a raw kopf body.

        Raises:
            TypeMismatchError: If the body is not a ZeebeCluster
        """
        api_version = body.get("apiVersion")
        kind = body.get("kind")
        if api_version != API_GROUP_VERSION or kind != KIND_ZEEBE_CLUSTER:
            raise TypeMismatchError(
                f"managed resource is not a {KIND_ZEEBE_CLUSTER} custom resource: {api_version}/{kind}"
            )

        meta = body.get("metadata") or {}
        spec = body.get("spec") or {}
        status = body.get("status") or {}
        provider_ref = spec.get("providerConfigRef") or {}
        return cls(
            name=meta.get("name", ""),
            uid=meta.get("uid", ""),
            generation=meta.get("generation", 0),
            provider_config_name=provider_ref.get("name") or DEFAULT_PROVIDER_CONFIG,
            spec=DesiredSpec.from_dict(spec),
            status=ObservedStatus.from_dict(status),
            conditions=[dict(cond) for cond in status.get("conditions") or []],
        )

    def set_condition(self, condition: Condition) -> None:
        self.condition = condition
