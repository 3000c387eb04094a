"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol

from artwork_deployer.domain import DeploymentRecord, PublishResult, VerificationResult

from .contract_artifact import ContractArtifact


class ContractDeployerPort(Protocol):
    """Port definition for submitting one contract-creation transaction."""

    def adapter_network_name(self) -> str:
        """Return the configured network label for diagnostics.

        Returns:
            str: Network label.
        """

    def adapter_deploy_contract(self) -> DeploymentRecord:
        """Deploy the configured contract and wait for confirmation.

        Returns:
            DeploymentRecord: Confirmed deployment outcome.

        Raises:
            ConnectionError: Raised when the RPC endpoint is unreachable.
            TimeoutError: Raised when submission or confirmation times out.
            ValueError: Raised when the transaction or artifact is rejected.
            RuntimeError: Raised when the transaction reverts.
        """


class VariablePublisherPort(Protocol):
    """Port definition for writing a deployed address to one sink."""

    def adapter_sink_name(self) -> str:
        """Return stable sink identifier.

        Returns:
            str: Sink identifier.
        """

    def adapter_publish_address(self, record: DeploymentRecord) -> PublishResult:
        """Write the deployed contract address to the sink.

        Args:
            record: Confirmed deployment outcome.

        Returns:
            PublishResult: Typed success or failure outcome.
        """


class ContractVerifierPort(Protocol):
    """Port definition for submitting deployed source for verification."""

    def adapter_verify_contract(
        self,
        contract_address: str,
        artifact: ContractArtifact,
        chain_id: int,
    ) -> VerificationResult:
        """Submit source for verification and wait for the final status.

        Args:
            contract_address: Deployed contract address.
            artifact: Compiled artifact of the deployed contract.
            chain_id: Chain the contract lives on.

        Returns:
            VerificationResult: Final verification status.

        Raises:
            ConnectionError: Raised when the verification service is unreachable.
            TimeoutError: Raised when verification stays pending.
            RuntimeError: Raised when verification is rejected or fails.
        """
