"""Adapter layer package for chain, CI, and verification integration boundaries."""

from .contract_artifact import ContractArtifact, artifact_load_contract
from .errors import (
	ContractArtifactError,
	DeployerAdapterError,
	DeploymentConnectionError,
	DeploymentFundsError,
	DeploymentNetworkMismatchError,
	DeploymentRevertedError,
	DeploymentSubmissionError,
	DeploymentTimeoutError,
	VerificationError,
	VerificationFailedError,
	VerificationRequestError,
	VerificationTimeoutError,
)
from .etherscan_verifier import EtherscanContractVerifier
from .github_variables import GitHubVariablePublisher
from .interfaces import ContractDeployerPort, ContractVerifierPort, VariablePublisherPort
from .local_export import LocalEnvironmentExporter
from .retry import RetryStrategy
from .web3_deployer import Web3ContractDeployer

__all__ = [
	"ContractArtifact",
	"ContractArtifactError",
	"ContractDeployerPort",
	"ContractVerifierPort",
	"DeployerAdapterError",
	"DeploymentConnectionError",
	"DeploymentFundsError",
	"DeploymentNetworkMismatchError",
	"DeploymentRevertedError",
	"DeploymentSubmissionError",
	"DeploymentTimeoutError",
	"EtherscanContractVerifier",
	"GitHubVariablePublisher",
	"LocalEnvironmentExporter",
	"RetryStrategy",
	"VariablePublisherPort",
	"VerificationError",
	"VerificationFailedError",
	"VerificationRequestError",
	"VerificationTimeoutError",
	"Web3ContractDeployer",
	"artifact_load_contract",
]
