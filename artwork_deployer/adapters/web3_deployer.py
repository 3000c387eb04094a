"""web3.py deployment driver for one contract-creation transaction."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import Any, Callable, Final, TypeVar

from eth_account import Account
import requests
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from artwork_deployer.domain import DeploymentRecord

from .contract_artifact import ContractArtifact, artifact_load_contract
from .errors import (
    DeploymentConnectionError,
    DeploymentFundsError,
    DeploymentNetworkMismatchError,
    DeploymentRevertedError,
    DeploymentSubmissionError,
    DeploymentTimeoutError,
)
from .interfaces import ContractDeployerPort

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class Web3ContractDeployer(ContractDeployerPort):
    """Deploy a compiled contract over JSON-RPC and wait for its receipt.

    Every call submits a new creation transaction, so repeated calls create
    independent contract instances with distinct addresses.
    """

    _INSUFFICIENT_FUNDS_MARKER: Final[str] = "insufficient funds"

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        artifact_path: str | Path,
        contract_name: str = "Artwork",
        network_name: str = "sepolia",
        chain_id: int | None = None,
        request_timeout_seconds: float = 30.0,
        confirmation_timeout_seconds: float = 120.0,
        poll_latency_seconds: float = 2.0,
        web3_client: Web3 | None = None,
    ):
        """Initialize the deployment driver.

        Args:
            rpc_url: Network JSON-RPC endpoint URL.
            private_key: Hex signing key of the deployer account.
            artifact_path: Compiled artifact JSON path.
            contract_name: Contract name the artifact must declare.
            network_name: Network label recorded on the deployment.
            chain_id: Expected chain id; resolved from RPC when None.
            request_timeout_seconds: Timeout for each RPC HTTP request.
            confirmation_timeout_seconds: Maximum wait for the transaction receipt.
            poll_latency_seconds: Interval between receipt polls.
            web3_client: Optional preconfigured web3 client.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_rpc_url = rpc_url.strip()
        normalized_private_key = private_key.strip()
        normalized_contract_name = contract_name.strip()
        normalized_network_name = network_name.strip()

        if not normalized_rpc_url:
            raise ValueError("rpc_url must not be blank")
        if not normalized_private_key:
            raise ValueError("private_key must not be blank")
        if not normalized_contract_name:
            raise ValueError("contract_name must not be blank")
        if not normalized_network_name:
            raise ValueError("network_name must not be blank")
        if chain_id is not None and chain_id < 1:
            raise ValueError("chain_id must be >= 1")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if confirmation_timeout_seconds <= 0:
            raise ValueError("confirmation_timeout_seconds must be > 0")
        if poll_latency_seconds <= 0:
            raise ValueError("poll_latency_seconds must be > 0")

        self._private_key = normalized_private_key
        self._deployer_address = Account.from_key(normalized_private_key).address
        self._artifact_path = Path(artifact_path)
        self._contract_name = normalized_contract_name
        self._network_name = normalized_network_name
        self._chain_id = chain_id
        self._confirmation_timeout_seconds = confirmation_timeout_seconds
        self._poll_latency_seconds = poll_latency_seconds
        self._web3 = web3_client or Web3(
            Web3.HTTPProvider(normalized_rpc_url, request_kwargs={"timeout": request_timeout_seconds})
        )

    @property
    def deployer_address(self) -> str:
        """Checksum address of the signing account."""

        return self._deployer_address

    def adapter_network_name(self) -> str:
        return self._network_name

    def adapter_deploy_contract(self) -> DeploymentRecord:
        """Submit one contract-creation transaction and wait for confirmation.

        Returns:
            DeploymentRecord: Confirmed deployment with checksum contract address.

        Raises:
            ContractArtifactError: Raised when the compiled artifact is unusable.
            DeploymentConnectionError: Raised when the RPC endpoint is unreachable.
            DeploymentTimeoutError: Raised when a request or the confirmation wait times out.
            DeploymentNetworkMismatchError: Raised when the RPC serves an unexpected chain.
            DeploymentFundsError: Raised when the deployer cannot pay for gas.
            DeploymentSubmissionError: Raised when the RPC rejects the transaction.
            DeploymentRevertedError: Raised when the transaction did not create a contract.
        """

        artifact = artifact_load_contract(self._artifact_path, expected_contract_name=self._contract_name)
        logger.info(
            "Deploying %s (bytecode sha256=%s) to %s from %s",
            artifact.contract_name,
            artifact.bytecode_sha256[:16],
            self._network_name,
            self._deployer_address,
        )

        chain_id = self.adapter_resolve_chain_id()
        transaction_hash = self._adapter_rpc_call(
            lambda: self._adapter_submit_creation_transaction(artifact=artifact, chain_id=chain_id),
            stage_label="submission",
        )
        transaction_hash_hex = Web3.to_hex(transaction_hash)
        logger.info(
            "Submitted creation transaction %s; waiting up to %.0fs for confirmation",
            transaction_hash_hex,
            self._confirmation_timeout_seconds,
        )

        receipt = self._adapter_rpc_call(
            lambda: self._web3.eth.wait_for_transaction_receipt(
                transaction_hash,
                timeout=self._confirmation_timeout_seconds,
                poll_latency=self._poll_latency_seconds,
            ),
            stage_label="confirmation",
        )
        return self._adapter_build_record(
            receipt=receipt,
            artifact=artifact,
            chain_id=chain_id,
            transaction_hash_hex=transaction_hash_hex,
        )

    def adapter_resolve_chain_id(self) -> int:
        """Return the chain id served by the RPC endpoint.

        Returns:
            int: Chain id reported by the node.

        Raises:
            DeploymentNetworkMismatchError: Raised when it differs from the configured chain id.
            DeploymentConnectionError: Raised when the RPC endpoint is unreachable.
        """

        chain_id = self._adapter_rpc_call(lambda: int(self._web3.eth.chain_id), stage_label="chain id lookup")
        if self._chain_id is not None and chain_id != self._chain_id:
            raise DeploymentNetworkMismatchError(
                f"RPC endpoint serves chain_id={chain_id}, expected {self._chain_id} for network={self._network_name}",
                error_code="DEPLOY_NETWORK_MISMATCH",
            )
        return chain_id

    def _adapter_submit_creation_transaction(self, artifact: ContractArtifact, chain_id: int) -> Any:
        contract_factory = self._web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        nonce = self._web3.eth.get_transaction_count(self._deployer_address, "pending")
        # gas and EIP-1559 fee fields are filled by web3 from the node
        transaction = contract_factory.constructor().build_transaction(
            {
                "from": self._deployer_address,
                "nonce": nonce,
                "chainId": chain_id,
            }
        )
        signed_transaction = self._web3.eth.account.sign_transaction(transaction, private_key=self._private_key)
        return self._web3.eth.send_raw_transaction(signed_transaction.raw_transaction)

    def _adapter_build_record(
        self,
        receipt: Any,
        artifact: ContractArtifact,
        chain_id: int,
        transaction_hash_hex: str,
    ) -> DeploymentRecord:
        """Convert a transaction receipt into a deployment record.

        Args:
            receipt: Transaction receipt mapping.
            artifact: Deployed artifact.
            chain_id: Chain the transaction was signed for.
            transaction_hash_hex: Hex transaction hash.

        Returns:
            DeploymentRecord: Immutable deployment outcome.

        Raises:
            DeploymentRevertedError: Raised when receipt status is not 1 or has no contract address.
        """

        receipt_status = receipt.get("status")
        if receipt_status != 1:
            raise DeploymentRevertedError(
                f"creation transaction {transaction_hash_hex} reverted (status={receipt_status})",
                error_code="DEPLOY_REVERTED",
            )
        contract_address = receipt.get("contractAddress")
        if not contract_address:
            raise DeploymentRevertedError(
                f"receipt for {transaction_hash_hex} carries no contract address",
                error_code="DEPLOY_REVERTED",
            )

        block_number = receipt.get("blockNumber")
        checksum_address = Web3.to_checksum_address(contract_address)
        logger.info("Creation transaction %s confirmed; contract address %s", transaction_hash_hex, checksum_address)
        return DeploymentRecord(
            contract_address=checksum_address,
            network=self._network_name,
            chain_id=chain_id,
            contract_name=artifact.contract_name,
            transaction_hash=transaction_hash_hex,
            deployer_address=self._deployer_address,
            block_number=int(block_number) if block_number is not None else None,
            deployed_at_utc=datetime.now(timezone.utc).isoformat(),
        )

    def _adapter_rpc_call(self, operation: Callable[[], _T], stage_label: str) -> _T:
        """Run one RPC-backed operation and map library errors to typed errors.

        Args:
            operation: Zero-argument callable performing RPC work.
            stage_label: Label used in error messages.

        Returns:
            _T: Operation result.

        Raises:
            DeploymentTimeoutError: Raised for request or receipt timeouts.
            DeploymentConnectionError: Raised for transport failures.
            DeploymentFundsError: Raised when the node reports insufficient funds.
            DeploymentSubmissionError: Raised for any other RPC rejection.
        """

        try:
            return operation()
        except TimeExhausted as error:
            raise DeploymentTimeoutError(
                f"transaction not confirmed within {self._confirmation_timeout_seconds:.0f}s during {stage_label}",
                error_code="DEPLOY_TIMEOUT_ERROR",
            ) from error
        except requests.exceptions.Timeout as error:
            raise DeploymentTimeoutError(
                f"RPC request timed out during {stage_label}",
                error_code="DEPLOY_TIMEOUT_ERROR",
            ) from error
        except requests.exceptions.ConnectionError as error:
            raise DeploymentConnectionError(
                f"RPC endpoint unreachable during {stage_label}",
                error_code="DEPLOY_CONNECTION_ERROR",
            ) from error
        except requests.exceptions.HTTPError as error:
            raise DeploymentConnectionError(
                f"RPC endpoint returned HTTP error during {stage_label}: {error}",
                error_code="DEPLOY_CONNECTION_ERROR",
            ) from error
        except requests.exceptions.RequestException as error:
            raise DeploymentConnectionError(
                f"RPC request failed during {stage_label}: {error}",
                error_code="DEPLOY_CONNECTION_ERROR",
            ) from error
        except (Web3Exception, ValueError) as error:
            if self._INSUFFICIENT_FUNDS_MARKER in str(error).lower():
                raise DeploymentFundsError(
                    f"deployer {self._deployer_address} has insufficient funds on {self._network_name}",
                    error_code="DEPLOY_INSUFFICIENT_FUNDS",
                ) from error
            raise DeploymentSubmissionError(
                f"RPC rejected {stage_label}: {error}",
                error_code="DEPLOY_SUBMISSION_ERROR",
            ) from error
