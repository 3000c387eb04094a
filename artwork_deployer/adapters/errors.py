"""Project-native typed exceptions for deployment and verification adapters."""

from __future__ import annotations


class DeployerAdapterError(Exception):
    """Base exception for adapter-level failures.

    Attributes:
        error_code: Optional deterministic error code for diagnostics.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class ContractArtifactError(DeployerAdapterError, ValueError):
    """Compiled artifact is missing, unreadable, or incomplete."""


class DeploymentConnectionError(DeployerAdapterError, ConnectionError):
    """Transport-level connectivity failure while talking to the RPC endpoint."""


class DeploymentTimeoutError(DeployerAdapterError, TimeoutError):
    """RPC request or confirmation wait exceeded its configured timeout."""


class DeploymentSubmissionError(DeployerAdapterError, ValueError):
    """RPC endpoint rejected the contract-creation transaction."""


class DeploymentFundsError(DeploymentSubmissionError):
    """Deployer account cannot cover gas for the creation transaction."""


class DeploymentNetworkMismatchError(DeploymentSubmissionError):
    """Configured chain id does not match the chain served by the RPC endpoint."""


class DeploymentRevertedError(DeployerAdapterError, RuntimeError):
    """Transaction was mined but did not create a contract."""


class VerificationError(DeployerAdapterError, RuntimeError):
    """Base failure for source verification requests."""


class VerificationRequestError(VerificationError):
    """Verification service rejected the submission or returned an invalid response."""


class VerificationFailedError(VerificationError):
    """Verification service processed the submission and reported failure."""


class VerificationTimeoutError(DeployerAdapterError, TimeoutError):
    """Verification remained pending after all status polls."""
