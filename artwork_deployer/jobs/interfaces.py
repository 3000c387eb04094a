"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from artwork_deployer.domain import DeploymentRecord, PipelineState, PublishResult


@dataclass(frozen=True)
class JobExecutionResult:
    """Result contract for one pipeline execution.

    Attributes:
        job_name: Job identifier.
        status: Final execution status (`success` or `failed`).
        state: Final pipeline state.
        deployment: Deployment outcome when the contract was created.
        publish_results: Sink outcomes in the order they were attempted.
        error_code: Deterministic failure code, None on success.
        error_message: Failure message, None on success.
        timeline: Structured stage events recorded during execution.
    """

    job_name: str
    status: str
    state: PipelineState
    deployment: DeploymentRecord | None = None
    publish_results: tuple[PublishResult, ...] = ()
    error_code: str | None = None
    error_message: str | None = None
    timeline: tuple[dict[str, object], ...] = field(default_factory=tuple)

    def job_is_partial_success(self) -> bool:
        """Return whether the contract exists on-chain although the run failed.

        Returns:
            bool: True when deployment succeeded and a later stage failed.
        """

        return self.status != "success" and self.deployment is not None


class JobOrchestratorPort(Protocol):
    """Port definition for orchestrating deployment jobs."""

    def job_supported_names(self) -> tuple[str, ...]:
        """Return the set of workflow names this orchestrator can execute.

        Returns:
            tuple[str, ...]: Deterministic list of supported job names.
        """

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Execute one named workflow in the job layer.

        Args:
            job_name: Workflow name.

        Returns:
            JobExecutionResult: Final execution status payload.

        Raises:
            ValueError: Raised when the job name is unsupported.
        """
