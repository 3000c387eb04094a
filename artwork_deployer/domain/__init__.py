"""Domain models used across application layer boundaries."""

from .models import (
	PIPELINE_ALLOWED_TRANSITIONS,
	DeploymentRecord,
	PipelineState,
	PublishResult,
	VerificationResult,
	domain_pipeline_transition,
)
from .timeline import domain_build_stage_event

__all__ = [
	"DeploymentRecord",
	"PIPELINE_ALLOWED_TRANSITIONS",
	"PipelineState",
	"PublishResult",
	"VerificationResult",
	"domain_build_stage_event",
	"domain_pipeline_transition",
]
