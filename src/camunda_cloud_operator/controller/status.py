"""Map remote cluster health onto local conditions."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import REMOTE_READY_CREATING, REMOTE_READY_HEALTHY, REMOTE_READY_NOT_HEALTHY
from ..models import Condition


@dataclass(frozen=True)
class StatusMapping:
    condition: Condition
    up_to_date: bool


# Closed table: a new remote status string must be added here explicitly.
READY_STATUS_MAP = {
    REMOTE_READY_HEALTHY: Condition.AVAILABLE,
    REMOTE_READY_CREATING: Condition.CREATING,
    REMOTE_READY_NOT_HEALTHY: Condition.UNAVAILABLE,
}


def map_ready_status(ready: str | None) -> StatusMapping:
    """Translate the remote ``ready`` value into a condition.

    Values outside the table, and ``None`` for a failed fetch, map to
    Unavailable and mark the observation as not up to date.
    """
    condition = READY_STATUS_MAP.get(ready) if ready is not None else None
    if condition is None:
        return StatusMapping(Condition.UNAVAILABLE, up_to_date=False)
    return StatusMapping(condition, up_to_date=True)
