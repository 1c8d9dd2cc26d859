"""Models for Camunda Cloud console API payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _name_of(value: Any) -> str:
    """Return the ``name`` of a nested ``{uuid, name}`` reference, or ''."""
    if isinstance(value, dict):
        return value.get("name") or ""
    return ""


@dataclass
class ClusterStatus:
    """Detailed status of a remote cluster.

    ``ready`` is the overall health string ("Healthy", "Creating",
    "Not Healthy", ...). Any other fields the API reports are kept verbatim.
    """

    ready: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> ClusterStatus:
        data = dict(data or {})
        ready = data.pop("ready", "") or ""
        return cls(ready=ready, details=data)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ClusterStatus:
        return cls.from_api(data)

    def to_dict(self) -> dict[str, Any]:
        return {"ready": self.ready, **self.details}


@dataclass
class RemoteCluster:
    """Live description of a remote cluster as returned by a name lookup."""

    id: str
    name: str
    plan: str = ""
    generation: str = ""
    channel: str = ""
    region: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RemoteCluster:
        return cls(
            id=data.get("uuid") or data.get("id") or "",
            name=data.get("name", ""),
            plan=_name_of(data.get("planType")),
            generation=_name_of(data.get("generation")),
            channel=_name_of(data.get("channel")),
            region=_name_of(data.get("region") or data.get("k8sContext")),
        )


@dataclass
class ClusterParameters:
    """Plans, channels, generations and regions the API accepts, keyed by name."""

    plans: dict[str, str] = field(default_factory=dict)
    channels: dict[str, str] = field(default_factory=dict)
    generations: dict[str, dict[str, str]] = field(default_factory=dict)
    regions: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ClusterParameters:
        params = cls()
        for plan in data.get("clusterPlanTypes", data.get("clusters", [])):
            params.plans[plan.get("name", "")] = plan.get("uuid", "")
        for region in data.get("regions", []):
            params.regions[region.get("name", "")] = region.get("uuid", "")
        for channel in data.get("channels", []):
            channel_name = channel.get("name", "")
            params.channels[channel_name] = channel.get("uuid", "")
            params.generations[channel_name] = {
                generation.get("name", ""): generation.get("uuid", "")
                for generation in channel.get("allowedGenerations", [])
            }
        return params
