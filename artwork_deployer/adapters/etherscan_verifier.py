"""Etherscan-compatible source verification adapter."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Final

import httpx

from artwork_deployer.domain import VerificationResult

from .contract_artifact import ContractArtifact
from .errors import (
    VerificationFailedError,
    VerificationRequestError,
    VerificationTimeoutError,
)
from .interfaces import ContractVerifierPort

logger = logging.getLogger(__name__)


class EtherscanContractVerifier(ContractVerifierPort):
    """Adapter for the `verifysourcecode` then `checkverifystatus` flow."""

    _USER_AGENT: Final[str] = "artwork-deployer/1.0 (Python/httpx)"
    _CODE_FORMAT: Final[str] = "solidity-standard-json-input"
    _ALREADY_VERIFIED_MARKER: Final[str] = "already verified"
    _PENDING_MARKER: Final[str] = "pending"
    _PASS_PREFIX: Final[str] = "pass"
    _FAIL_PREFIX: Final[str] = "fail"

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.etherscan.io/v2/api",
        poll_attempts: int = 10,
        poll_interval_seconds: float = 5.0,
        request_timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        """Initialize verification adapter.

        Args:
            api_key: Verification service API key.
            api_url: Verification API endpoint.
            poll_attempts: Number of status polls before giving up.
            poll_interval_seconds: Delay before each status poll.
            request_timeout_seconds: HTTP request timeout in seconds.
            http_client: Optional preconfigured HTTP client.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_api_key = api_key.strip()
        normalized_api_url = api_url.strip()
        if not normalized_api_key:
            raise ValueError("api_key must not be blank")
        if not normalized_api_url:
            raise ValueError("api_url must not be blank")
        if poll_attempts < 1:
            raise ValueError("poll_attempts must be >= 1")
        if poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._api_key = normalized_api_key
        self._api_url = normalized_api_url
        self._poll_attempts = poll_attempts
        self._poll_interval_seconds = poll_interval_seconds
        self._request_timeout_seconds = request_timeout_seconds
        self._http_client = http_client

    def adapter_verify_contract(
        self,
        contract_address: str,
        artifact: ContractArtifact,
        chain_id: int,
    ) -> VerificationResult:
        """Submit standard-JSON source for verification and poll until settled.

        Args:
            contract_address: Deployed contract address.
            artifact: Compiled artifact with a Hardhat build-info reference.
            chain_id: Chain the contract lives on.

        Returns:
            VerificationResult: Final verification outcome.

        Raises:
            ContractArtifactError: Raised when build-info is unavailable.
            ConnectionError: Raised for transport failures.
            VerificationRequestError: Raised when the submission is rejected.
            VerificationFailedError: Raised when verification fails.
            VerificationTimeoutError: Raised when verification stays pending.
        """

        normalized_address = contract_address.strip()
        if not normalized_address:
            raise ValueError("contract_address must not be blank")

        build_info = artifact.artifact_load_build_info()
        submission_form = {
            "module": "contract",
            "action": "verifysourcecode",
            "contractaddress": normalized_address,
            "sourceCode": json.dumps(build_info["input"]),
            "codeformat": self._CODE_FORMAT,
            "contractname": artifact.artifact_fully_qualified_name(),
            "compilerversion": f"v{str(build_info['solcLongVersion']).strip()}",
            "constructorArguements": "",
        }
        logger.info(
            "Submitting %s at %s for verification (compiler v%s)",
            artifact.artifact_fully_qualified_name(),
            normalized_address,
            build_info["solcLongVersion"],
        )
        submission_payload = self._adapter_request(
            method="POST",
            chain_id=chain_id,
            query_parameters={},
            form_data=submission_form,
        )
        submission_result = str(submission_payload.get("result") or "").strip()
        if str(submission_payload.get("status")) != "1":
            if self._ALREADY_VERIFIED_MARKER in submission_result.lower():
                logger.info("Contract %s is already verified", normalized_address)
                return VerificationResult(
                    contract_address=normalized_address,
                    guid=None,
                    status=submission_result,
                    already_verified=True,
                )
            raise VerificationRequestError(
                f"verification submission rejected: {submission_result or submission_payload.get('message')}",
                error_code="VERIFY_REQUEST_REJECTED",
            )
        if not submission_result:
            raise VerificationRequestError("verification response missing guid", error_code="VERIFY_REQUEST_REJECTED")

        return self._adapter_poll_status(contract_address=normalized_address, guid=submission_result, chain_id=chain_id)

    def _adapter_poll_status(self, contract_address: str, guid: str, chain_id: int) -> VerificationResult:
        """Poll verification status until it passes, fails, or attempts run out.

        Args:
            contract_address: Contract being verified.
            guid: Submission identifier.
            chain_id: Chain the contract lives on.

        Returns:
            VerificationResult: Passed verification outcome.

        Raises:
            VerificationFailedError: Raised when the service reports failure.
            VerificationTimeoutError: Raised when still pending after all polls.
        """

        status_parameters = {"module": "contract", "action": "checkverifystatus", "guid": guid}
        for poll_index in range(self._poll_attempts):
            if self._poll_interval_seconds > 0:
                time.sleep(self._poll_interval_seconds)

            status_payload = self._adapter_request(
                method="GET",
                chain_id=chain_id,
                query_parameters=status_parameters,
                form_data=None,
            )
            status_text = str(status_payload.get("result") or "").strip()
            normalized_status = status_text.lower()
            if normalized_status.startswith(self._PASS_PREFIX):
                logger.info("Verification passed for %s: %s", contract_address, status_text)
                return VerificationResult(contract_address=contract_address, guid=guid, status=status_text)
            if self._ALREADY_VERIFIED_MARKER in normalized_status:
                return VerificationResult(
                    contract_address=contract_address,
                    guid=guid,
                    status=status_text,
                    already_verified=True,
                )
            if normalized_status.startswith(self._FAIL_PREFIX):
                raise VerificationFailedError(
                    f"verification failed for {contract_address}: {status_text}",
                    error_code="VERIFY_FAILED",
                )
            if self._PENDING_MARKER not in normalized_status:
                raise VerificationRequestError(
                    f"unexpected verification status for guid={guid}: {status_text or status_payload}",
                    error_code="VERIFY_UNEXPECTED_STATUS",
                )
            logger.debug("Verification pending for guid=%s (poll %d/%d)", guid, poll_index + 1, self._poll_attempts)

        raise VerificationTimeoutError(
            f"verification for {contract_address} still pending after {self._poll_attempts} polls",
            error_code="VERIFY_TIMEOUT",
        )

    def _adapter_request(
        self,
        method: str,
        chain_id: int,
        query_parameters: dict[str, str],
        form_data: dict[str, str] | None,
    ) -> dict[str, Any]:
        """Execute one API request and return the decoded JSON body.

        Args:
            method: HTTP method.
            chain_id: Chain id query parameter.
            query_parameters: Additional query string parameters.
            form_data: Optional urlencoded form body.

        Returns:
            dict[str, Any]: Decoded response payload.

        Raises:
            TimeoutError: Raised when the request times out.
            ConnectionError: Raised for transport failures and non-success HTTP status.
            VerificationRequestError: Raised when the body is not a JSON object.
        """

        params = {"chainid": str(chain_id), "apikey": self._api_key, **query_parameters}
        headers = {"User-Agent": self._USER_AGENT}
        try:
            if self._http_client is not None:
                response = self._http_client.request(method, self._api_url, params=params, data=form_data, headers=headers)
            else:
                with httpx.Client(timeout=self._request_timeout_seconds) as client:
                    response = client.request(method, self._api_url, params=params, data=form_data, headers=headers)
        except httpx.TimeoutException as error:
            raise TimeoutError("verification request timed out") from error
        except httpx.TransportError as error:
            raise ConnectionError("verification request failed") from error

        if not response.is_success:
            raise ConnectionError(f"verification service returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as error:
            raise VerificationRequestError(
                "verification service returned a non-JSON body",
                error_code="VERIFY_INVALID_RESPONSE",
            ) from error
        if not isinstance(payload, dict):
            raise VerificationRequestError(
                "verification service returned an unexpected body",
                error_code="VERIFY_INVALID_RESPONSE",
            )
        return payload
