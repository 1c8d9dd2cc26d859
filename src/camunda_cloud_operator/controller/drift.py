"""Drift detection between the declared spec and the remote cluster.

Once a cluster exists, the remote side is the source of truth: any declared
field that differs from the remote value is overwritten with the remote value
(adoption). Field drift never asks for an Update.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import DesiredSpec
from ..services.camunda.models import RemoteCluster

# DesiredSpec attribute -> RemoteCluster attribute
REMOTE_FIELDS = {
    "plan_name": "plan",
    "generation_name": "generation",
    "channel_name": "channel",
    "region": "region",
}


@dataclass
class DriftResult:
    exists: bool
    up_to_date: bool
    adopted: dict[str, tuple[str, str]] = field(default_factory=dict)


def detect_drift(spec: DesiredSpec, cluster_id: str, remote: RemoteCluster | None) -> DriftResult:
    """Compare ``spec`` with ``remote`` and adopt remote values into ``spec``.

    Args:
        spec: Declared spec; mutated in place when fields are adopted
        cluster_id: Locally recorded remote id ('' if never created)
        remote: Result of the remote name lookup, None when nothing matched

    Returns:
        DriftResult; ``adopted`` maps CRD field names to (declared, remote)
    """
    if remote is None and not cluster_id:
        return DriftResult(exists=False, up_to_date=True)

    result = DriftResult(exists=True, up_to_date=True)
    if remote is None:
        # known locally but not visible by name: nothing to adopt from
        return result

    for attr, key in DesiredSpec.FIELDS:
        declared = getattr(spec, attr)
        observed = getattr(remote, REMOTE_FIELDS[attr])
        if declared != observed:
            setattr(spec, attr, observed)
            result.adopted[key] = (declared, observed)

    return result
