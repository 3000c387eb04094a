"""Typed domain models shared across runtime layers.

These contracts carry the deployment outcome from the driver to the
publishers and back to the entrypoint. None of them are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PipelineState(str, Enum):
    """Lifecycle states of one deploy-and-publish run."""

    START = "start"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


PIPELINE_ALLOWED_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.START: frozenset({PipelineState.DEPLOYING}),
    PipelineState.DEPLOYING: frozenset({PipelineState.DEPLOYED, PipelineState.FAILED}),
    PipelineState.DEPLOYED: frozenset({PipelineState.PUBLISHING}),
    PipelineState.PUBLISHING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


def domain_pipeline_transition(current: PipelineState, target: PipelineState) -> PipelineState:
    """Validate one pipeline state transition and return the target state.

    Args:
        current: State the pipeline is leaving.
        target: State the pipeline is entering.

    Returns:
        PipelineState: The accepted target state.

    Raises:
        RuntimeError: Raised when the transition is not permitted.
    """

    if target not in PIPELINE_ALLOWED_TRANSITIONS[current]:
        raise RuntimeError(f"invalid pipeline transition {current.value} -> {target.value}")
    return target


@dataclass(frozen=True)
class DeploymentRecord:
    """Outcome of one confirmed contract-creation transaction.

    Attributes:
        contract_address: EIP-55 checksum address of the new contract instance.
        network: Configured network label.
        chain_id: Numeric chain id the transaction was signed for.
        contract_name: Deployed contract name.
        transaction_hash: Hex hash of the creation transaction.
        deployer_address: Address of the signing account.
        block_number: Block that included the transaction, when reported.
        deployed_at_utc: ISO-8601 confirmation timestamp.
    """

    contract_address: str
    network: str
    chain_id: int
    contract_name: str
    transaction_hash: str
    deployer_address: str
    block_number: int | None
    deployed_at_utc: str


@dataclass(frozen=True)
class PublishResult:
    """Typed outcome of writing the deployed address to one sink.

    Attributes:
        sink: Sink identifier.
        success: Whether the write was accepted.
        status_code: HTTP status for remote sinks, None otherwise.
        detail: Human-readable outcome or failure reason.
        attempts: Number of attempts made.
    """

    sink: str
    success: bool
    status_code: int | None = None
    detail: str = ""
    attempts: int = 1


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a source verification submission.

    Attributes:
        contract_address: Verified contract address.
        guid: Verification request identifier returned by the service.
        status: Final status text reported by the service.
        already_verified: Whether the service reported a prior verification.
    """

    contract_address: str
    guid: str | None
    status: str
    already_verified: bool = False
