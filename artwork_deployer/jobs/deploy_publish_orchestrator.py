"""Job-layer deploy-and-publish orchestrator with a strict linear state machine."""

from __future__ import annotations

import logging
from typing import Sequence

from artwork_deployer.adapters import (
    ContractArtifactError,
    ContractDeployerPort,
    DeployerAdapterError,
    DeploymentConnectionError,
    DeploymentFundsError,
    DeploymentNetworkMismatchError,
    DeploymentRevertedError,
    DeploymentTimeoutError,
    VariablePublisherPort,
)
from artwork_deployer.domain import (
    DeploymentRecord,
    PipelineState,
    PublishResult,
    domain_build_stage_event,
    domain_pipeline_transition,
)

from .interfaces import JobExecutionResult, JobOrchestratorPort

logger = logging.getLogger(__name__)

PUBLISH_FAILED_AFTER_DEPLOY_CODE = "PUBLISH_FAILED_AFTER_DEPLOY"


class DeployPublishOrchestrator(JobOrchestratorPort):
    """Run deploy then publish, gating each stage on the previous one.

    The deployment step runs exactly once per execution and is never retried.
    Publishers run in the given order after the address has been logged; the
    first failed sink ends the run.
    """

    _DEPLOY_PUBLISH_JOB_NAME = "deploy_publish"

    def __init__(
        self,
        contract_deployer: ContractDeployerPort,
        publishers: Sequence[VariablePublisherPort] = (),
    ):
        """Initialize orchestrator dependencies.

        Args:
            contract_deployer: Adapter submitting the creation transaction.
            publishers: Address sinks, attempted in order; may be empty.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if contract_deployer is None:
            raise ValueError("contract_deployer must not be None")
        if any(publisher is None for publisher in publishers):
            raise ValueError("publishers must not contain None")

        self._contract_deployer = contract_deployer
        self._publishers = tuple(publishers)

    def job_supported_names(self) -> tuple[str, ...]:
        return (self._DEPLOY_PUBLISH_JOB_NAME,)

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Execute the deploy-and-publish workflow.

        Args:
            job_name: Name of job to execute.

        Returns:
            JobExecutionResult: Final status, state, deployment and sink outcomes.

        Raises:
            ValueError: Raised when job name is unsupported.
        """

        normalized_job_name = job_name.strip()
        if normalized_job_name != self._DEPLOY_PUBLISH_JOB_NAME:
            raise ValueError(f"unsupported job_name={normalized_job_name}")

        timeline: list[dict[str, object]] = []
        state = PipelineState.START
        timeline.append(domain_build_stage_event(stage="run", status="started", pipeline_state=state))

        state = domain_pipeline_transition(state, PipelineState.DEPLOYING)
        timeline.append(
            domain_build_stage_event(
                stage="deploy",
                status="started",
                details={"network": self._contract_deployer.adapter_network_name()},
                pipeline_state=state,
            )
        )
        try:
            deployment = self._contract_deployer.adapter_deploy_contract()
        except (TimeoutError, ConnectionError, ValueError, RuntimeError) as error:
            error_code = self._job_error_code_for_exception(error)
            logger.error("Deployment failed [%s]: %s", error_code, error)
            return self._job_build_failure(
                job_name=normalized_job_name,
                state=state,
                timeline=timeline,
                stage="deploy",
                error_code=error_code,
                error_message=str(error),
                error_type=type(error).__name__,
            )

        state = domain_pipeline_transition(state, PipelineState.DEPLOYED)
        timeline.append(
            domain_build_stage_event(
                stage="deploy",
                status="completed",
                details=self._job_deployment_details(deployment),
                pipeline_state=state,
            )
        )
        # logged before any publish attempt so the address survives a publish failure
        logger.info(
            "%s contract deployed to %s on %s (tx %s)",
            deployment.contract_name,
            deployment.contract_address,
            deployment.network,
            deployment.transaction_hash,
        )

        state = domain_pipeline_transition(state, PipelineState.PUBLISHING)
        timeline.append(
            domain_build_stage_event(
                stage="publish",
                status="started",
                details={"sinks": [publisher.adapter_sink_name() for publisher in self._publishers]},
                pipeline_state=state,
            )
        )
        publish_results: list[PublishResult] = []
        for publisher in self._publishers:
            publish_result = self._job_publish_to_sink(publisher=publisher, deployment=deployment)
            publish_results.append(publish_result)
            timeline.append(
                domain_build_stage_event(
                    stage="publish",
                    status="completed" if publish_result.success else "failed",
                    details={
                        "sink": publish_result.sink,
                        "status_code": publish_result.status_code,
                        "detail": publish_result.detail,
                        "attempts": publish_result.attempts,
                    },
                )
            )
            if not publish_result.success:
                logger.error(
                    "Contract deployed to %s but publishing to %s failed: %s",
                    deployment.contract_address,
                    publish_result.sink,
                    publish_result.detail,
                )
                return self._job_build_failure(
                    job_name=normalized_job_name,
                    state=state,
                    timeline=timeline,
                    stage="publish",
                    error_code=PUBLISH_FAILED_AFTER_DEPLOY_CODE,
                    error_message=f"{publish_result.sink}: {publish_result.detail}",
                    error_type="PublishResult",
                    deployment=deployment,
                    publish_results=tuple(publish_results),
                )

        state = domain_pipeline_transition(state, PipelineState.DONE)
        timeline.append(domain_build_stage_event(stage="run", status="success", pipeline_state=state))
        return JobExecutionResult(
            job_name=normalized_job_name,
            status="success",
            state=state,
            deployment=deployment,
            publish_results=tuple(publish_results),
            timeline=tuple(timeline),
        )

    def _job_publish_to_sink(
        self,
        publisher: VariablePublisherPort,
        deployment: DeploymentRecord,
    ) -> PublishResult:
        """Run one publisher and fold unexpected adapter errors into a failed result.

        Args:
            publisher: Sink adapter.
            deployment: Confirmed deployment outcome.

        Returns:
            PublishResult: Sink outcome.
        """

        try:
            return publisher.adapter_publish_address(deployment)
        except (OSError, ValueError, RuntimeError) as error:
            return PublishResult(
                sink=publisher.adapter_sink_name(),
                success=False,
                detail=f"{type(error).__name__}: {error}",
            )

    def _job_build_failure(
        self,
        job_name: str,
        state: PipelineState,
        timeline: list[dict[str, object]],
        stage: str,
        error_code: str,
        error_message: str,
        error_type: str,
        deployment: DeploymentRecord | None = None,
        publish_results: tuple[PublishResult, ...] = (),
    ) -> JobExecutionResult:
        """Move the pipeline into the absorbing failed state and build the result.

        Args:
            job_name: Validated job name.
            state: State the failure occurred in.
            timeline: Mutable stage timeline events.
            stage: Stage that failed.
            error_code: Deterministic failure code.
            error_message: Failure message.
            error_type: Failure type label.
            deployment: Deployment outcome when the contract was created.
            publish_results: Sink outcomes collected so far.

        Returns:
            JobExecutionResult: Failed execution result.
        """

        failed_state = domain_pipeline_transition(state, PipelineState.FAILED)
        timeline.append(
            domain_build_stage_event(
                stage=stage,
                status="failed",
                details={"error_code": error_code, "error_type": error_type, "error_message": error_message},
                pipeline_state=failed_state,
            )
        )
        return JobExecutionResult(
            job_name=job_name,
            status="failed",
            state=failed_state,
            deployment=deployment,
            publish_results=publish_results,
            error_code=error_code,
            error_message=error_message,
            timeline=tuple(timeline),
        )

    def _job_deployment_details(self, deployment: DeploymentRecord) -> dict[str, object]:
        return {
            "contract_address": deployment.contract_address,
            "contract_name": deployment.contract_name,
            "network": deployment.network,
            "chain_id": deployment.chain_id,
            "transaction_hash": deployment.transaction_hash,
            "block_number": deployment.block_number,
        }

    def _job_error_code_for_exception(self, error: Exception) -> str:
        """Map deployment exception type to deterministic failure code.

        Args:
            error: Caught deployment exception.

        Returns:
            str: Deterministic error code.
        """

        if isinstance(error, ContractArtifactError):
            return "DEPLOY_ARTIFACT_ERROR"
        if isinstance(error, DeploymentNetworkMismatchError):
            return "DEPLOY_NETWORK_MISMATCH"
        if isinstance(error, DeploymentFundsError):
            return "DEPLOY_INSUFFICIENT_FUNDS"
        if isinstance(error, DeploymentRevertedError):
            return "DEPLOY_REVERTED"
        if isinstance(error, DeploymentTimeoutError):
            return "DEPLOY_TIMEOUT_ERROR"
        if isinstance(error, DeploymentConnectionError):
            return "DEPLOY_CONNECTION_ERROR"
        if isinstance(error, DeployerAdapterError) and error.error_code:
            return error.error_code
        if isinstance(error, TimeoutError):
            return "DEPLOY_TIMEOUT_ERROR"
        if isinstance(error, ConnectionError):
            return "DEPLOY_CONNECTION_ERROR"
        if isinstance(error, ValueError):
            return "DEPLOY_SUBMISSION_ERROR"
        return "DEPLOY_UNEXPECTED_ERROR"
