"""Typed runtime settings with dotenv support and startup validation."""

from __future__ import annotations

import re

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Deployment and publishing settings resolved once at process start.

    Environment variable names map directly to field names in uppercase.
    Example: `rpc_url` reads from `RPC_URL`.

    Attributes:
        rpc_url: Network JSON-RPC endpoint URL.
        deployer_private_key: Signing credential for the deployment transaction.
        etherscan_api_key: Contract-verification service API key.
        github_org: Organization owning the Actions variable.
        github_variable_name: Organization variable receiving the contract address.
        github_token: Bearer token for the variable update call.
        network_name: Human-readable network label.
        chain_id: Expected chain id; resolved from RPC when unset.
        contract_name: Name of the contract being deployed.
        contract_artifact_path: Path to the compiled contract artifact JSON.
        rpc_request_timeout_seconds: Timeout for each JSON-RPC HTTP request.
        deploy_confirmation_timeout_seconds: Maximum wait for the deployment receipt.
        deploy_poll_latency_seconds: Interval between receipt polls.
        local_export_enabled: Whether the address is exported to the local environment.
        local_export_variable_name: Process environment variable receiving the address.
        local_export_output_name: CI step output name receiving the address.
        github_env: Path of the CI environment file for later steps.
        github_output: Path of the CI step output file.
        remote_publish_enabled: Whether the organization variable is updated.
        github_api_url: GitHub REST API base URL.
        github_api_version: Value of the `X-GitHub-Api-Version` header.
        publish_request_timeout_seconds: Timeout for the variable update request.
        publish_retry_attempts: Total publish attempts; 1 disables retry.
        publish_backoff_base_seconds: Base retry delay for exponential backoff.
        publish_backoff_max_seconds: Maximum retry delay cap.
        etherscan_api_url: Verification API endpoint.
        verification_poll_attempts: Number of verification status polls.
        verification_poll_interval_seconds: Delay between verification status polls.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    rpc_url: str = Field(min_length=1)
    deployer_private_key: SecretStr
    etherscan_api_key: SecretStr | None = Field(default=None)
    github_org: str | None = Field(default=None)
    github_variable_name: str | None = Field(default=None)
    github_token: SecretStr | None = Field(default=None)

    network_name: str = Field(default="sepolia", min_length=1)
    chain_id: int | None = Field(default=None, ge=1)
    contract_name: str = Field(default="Artwork", min_length=1)
    contract_artifact_path: str = Field(default="artifacts/contracts/Artwork.sol/Artwork.json", min_length=1)
    rpc_request_timeout_seconds: float = Field(default=30.0, gt=0)
    deploy_confirmation_timeout_seconds: float = Field(default=120.0, gt=0)
    deploy_poll_latency_seconds: float = Field(default=2.0, gt=0)

    local_export_enabled: bool = Field(default=True)
    local_export_variable_name: str = Field(default="SC_ADDRESS", min_length=1)
    local_export_output_name: str = Field(default="contract_address", min_length=1)
    github_env: str | None = Field(default=None)
    github_output: str | None = Field(default=None)

    remote_publish_enabled: bool = Field(default=True)
    github_api_url: str = Field(default="https://api.github.com", min_length=1)
    github_api_version: str = Field(default="2022-11-28", min_length=1)
    publish_request_timeout_seconds: float = Field(default=30.0, gt=0)
    publish_retry_attempts: int = Field(default=1, ge=1, le=10)
    publish_backoff_base_seconds: float = Field(default=2.0, ge=0)
    publish_backoff_max_seconds: float = Field(default=30.0, gt=0)

    etherscan_api_url: str = Field(default="https://api.etherscan.io/v2/api", min_length=1)
    verification_poll_attempts: int = Field(default=10, ge=1)
    verification_poll_interval_seconds: float = Field(default=5.0, ge=0)

    @field_validator("rpc_url", "network_name", "contract_name", "contract_artifact_path")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("github_org", "github_variable_name", "github_env", "github_output")
    @classmethod
    def _normalize_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("deployer_private_key")
    @classmethod
    def _validate_private_key(cls, value: SecretStr) -> SecretStr:
        raw_key = value.get_secret_value().strip()
        if not raw_key:
            raise ValueError("value must not be blank")
        if not _PRIVATE_KEY_PATTERN.match(raw_key):
            raise ValueError("private key must be 32 bytes of hex, optionally 0x-prefixed")
        if not raw_key.startswith("0x"):
            raw_key = f"0x{raw_key}"
        return SecretStr(raw_key)

    @field_validator("etherscan_api_key", "github_token")
    @classmethod
    def _normalize_optional_secret(cls, value: SecretStr | None) -> SecretStr | None:
        if value is None:
            return None
        stripped_value = value.get_secret_value().strip()
        return SecretStr(stripped_value) if stripped_value else None

    @field_validator("publish_backoff_max_seconds")
    @classmethod
    def _validate_backoff_cap_bounds(cls, value: float, info) -> float:
        backoff_base_seconds = float(info.data.get("publish_backoff_base_seconds", 2.0))
        if value < backoff_base_seconds:
            raise ValueError("publish_backoff_max_seconds must be greater than or equal to publish_backoff_base_seconds")
        return value

    @field_validator("chain_id", mode="before")
    @classmethod
    def _normalize_blank_chain_id(cls, value: object) -> object:
        # CI runners export unset variables as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value


def config_load_settings(env_file: str | None = ".env") -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        env_file: Optional dotenv file path; None reads the process environment only.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings(_env_file=env_file)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_require_etherscan_api_key(settings: AppSettings) -> str:
    """Return the verification API key or fail with a configuration error.

    Args:
        settings: Loaded runtime settings.

    Returns:
        str: Non-empty verification API key.

    Raises:
        SettingsLoadError: Raised when ETHERSCAN_API_KEY is not configured.
    """

    if settings.etherscan_api_key is None:
        raise SettingsLoadError("Verification configuration validation failed. ETHERSCAN_API_KEY must not be blank.")
    return settings.etherscan_api_key.get_secret_value()


def config_require_remote_publish_settings(settings: AppSettings) -> tuple[str, str, str]:
    """Return organization variable target values or fail when any is missing.

    Only the deploy command publishes remotely, so these values are checked
    there instead of at settings load time.

    Args:
        settings: Loaded runtime settings.

    Returns:
        tuple[str, str, str]: Organization, variable name and bearer token.

    Raises:
        SettingsLoadError: Raised when remote publish is enabled and a value is missing.
    """

    missing_names = [
        field_name.upper()
        for field_name, field_value in (
            ("github_org", settings.github_org),
            ("github_variable_name", settings.github_variable_name),
            ("github_token", settings.github_token),
        )
        if field_value is None
    ]
    if missing_names:
        raise SettingsLoadError(
            "Remote publish configuration validation failed. Required values are missing: "
            f"{', '.join(missing_names)} (set REMOTE_PUBLISH_ENABLED=false to skip)"
        )
    return (
        settings.github_org or "",
        settings.github_variable_name or "",
        settings.github_token.get_secret_value() if settings.github_token else "",
    )
