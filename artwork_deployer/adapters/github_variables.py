"""GitHub organization Actions variable publisher."""

from __future__ import annotations

import logging
import time
from typing import Final
from urllib.parse import quote

import httpx

from artwork_deployer.domain import DeploymentRecord, PublishResult

from .interfaces import VariablePublisherPort
from .retry import RetryStrategy

logger = logging.getLogger(__name__)


class GitHubVariablePublisher(VariablePublisherPort):
    """Write the deployed address into an organization-level Actions variable.

    Issues `PATCH /orgs/{org}/actions/variables/{name}`. Outcomes are returned
    as `PublishResult` values; only 2xx responses count as success.
    """

    _USER_AGENT: Final[str] = "artwork-deployer/1.0 (Python/httpx)"
    _VARIABLE_PATH_TEMPLATE: Final[str] = "/orgs/{org}/actions/variables/{name}"
    _RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
    _RESPONSE_LOG_LIMIT: Final[int] = 500

    def __init__(
        self,
        org: str,
        variable_name: str,
        token: str,
        api_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        request_timeout_seconds: float = 30.0,
        retry_strategy: RetryStrategy | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the organization variable publisher.

        Args:
            org: Organization login.
            variable_name: Actions variable name.
            token: Bearer token with organization variable write access.
            api_url: GitHub REST API base URL.
            api_version: REST API version header value.
            request_timeout_seconds: HTTP request timeout in seconds.
            retry_strategy: Retry policy; defaults to a single attempt.
            http_client: Optional preconfigured HTTP client.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_org = org.strip()
        normalized_variable_name = variable_name.strip()
        normalized_token = token.strip()
        normalized_api_url = api_url.strip()

        if not normalized_org:
            raise ValueError("org must not be blank")
        if not normalized_variable_name:
            raise ValueError("variable_name must not be blank")
        if not normalized_token:
            raise ValueError("token must not be blank")
        if not normalized_api_url:
            raise ValueError("api_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._org = normalized_org
        self._variable_name = normalized_variable_name
        self._token = normalized_token
        self._api_url = normalized_api_url.rstrip("/")
        self._api_version = api_version.strip()
        self._request_timeout_seconds = request_timeout_seconds
        self._retry_strategy = retry_strategy or RetryStrategy()
        self._http_client = http_client

    def adapter_sink_name(self) -> str:
        return "github_org_variable"

    def adapter_variable_url(self) -> str:
        """Return the fully substituted variable endpoint URL.

        Returns:
            str: Endpoint URL with org and variable name quoted into the path.
        """

        variable_path = self._VARIABLE_PATH_TEMPLATE.format(
            org=quote(self._org, safe=""),
            name=quote(self._variable_name, safe=""),
        )
        return f"{self._api_url}{variable_path}"

    def adapter_publish_address(self, record: DeploymentRecord) -> PublishResult:
        """Publish the deployed address, retrying transient failures when configured.

        Args:
            record: Confirmed deployment outcome.

        Returns:
            PublishResult: Success for 2xx, failure with reason otherwise.
        """

        url = self.adapter_variable_url()
        payload = {"name": self._variable_name, "value": record.contract_address}
        attempt_number = 0
        while True:
            attempt_number += 1
            result, retryable = self._adapter_patch_once(url=url, payload=payload, attempt_number=attempt_number)
            if result.success or not retryable or not self._retry_strategy.strategy_has_retry_after(attempt_number):
                return result

            wait_seconds = self._retry_strategy.strategy_calculate_retry_wait_seconds(retry_index=attempt_number - 1)
            logger.warning(
                "Publish attempt %d/%d to %s failed (%s); retrying in %.1fs",
                attempt_number,
                self._retry_strategy.attempts,
                self._adapter_display_target(),
                result.detail,
                wait_seconds,
            )
            if wait_seconds > 0:
                time.sleep(wait_seconds)

    def _adapter_patch_once(
        self,
        url: str,
        payload: dict[str, str],
        attempt_number: int,
    ) -> tuple[PublishResult, bool]:
        """Execute one PATCH request and classify its outcome.

        Args:
            url: Variable endpoint URL.
            payload: JSON request body.
            attempt_number: One-based attempt counter.

        Returns:
            tuple[PublishResult, bool]: Outcome and whether it may be retried.
        """

        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "User-Agent": self._USER_AGENT,
        }
        if self._api_version:
            headers["X-GitHub-Api-Version"] = self._api_version

        try:
            if self._http_client is not None:
                response = self._http_client.patch(url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self._request_timeout_seconds) as client:
                    response = client.patch(url, json=payload, headers=headers)
        except httpx.TimeoutException as error:
            return self._adapter_failure(f"request timed out: {error}", None, attempt_number), True
        except httpx.TransportError as error:
            return self._adapter_failure(f"transport error: {error}", None, attempt_number), True
        except httpx.InvalidURL as error:
            return self._adapter_failure(f"invalid variable endpoint URL: {error}", None, attempt_number), False

        response_text = response.text[: self._RESPONSE_LOG_LIMIT]
        logger.info(
            "Publish response from %s: HTTP %d %s",
            self._adapter_display_target(),
            response.status_code,
            response_text,
        )
        if response.is_success:
            return (
                PublishResult(
                    sink=self.adapter_sink_name(),
                    success=True,
                    status_code=response.status_code,
                    detail=f"variable {self._variable_name} updated in org {self._org}",
                    attempts=attempt_number,
                ),
                False,
            )

        retryable = response.status_code in self._RETRYABLE_STATUS_CODES
        return (
            self._adapter_failure(
                f"HTTP {response.status_code}: {response_text or response.reason_phrase}",
                response.status_code,
                attempt_number,
            ),
            retryable,
        )

    def _adapter_failure(self, detail: str, status_code: int | None, attempt_number: int) -> PublishResult:
        return PublishResult(
            sink=self.adapter_sink_name(),
            success=False,
            status_code=status_code,
            detail=detail,
            attempts=attempt_number,
        )

    def _adapter_display_target(self) -> str:
        return f"org={self._org} variable={self._variable_name}"
