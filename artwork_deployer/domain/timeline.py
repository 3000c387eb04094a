"""Structured stage events for the deploy-and-publish timeline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .models import PipelineState


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
    pipeline_state: PipelineState | None = None,
) -> dict[str, object]:
    """Build one timeline event for a pipeline stage.

    Args:
        stage: Stage name such as `deploy` or `publish`.
        status: Stage status marker.
        details: Optional structured details object.
        pipeline_state: Pipeline state entered with this event, if any.

    Returns:
        dict[str, object]: JSON-serializable timeline event.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if pipeline_state is not None:
        event_payload["pipeline_state"] = pipeline_state.value
    if details is not None:
        event_payload["details"] = details
    return event_payload
