"""Application bootstrap wiring for validated settings and adapter assembly."""

from __future__ import annotations

from artwork_deployer.adapters import (
    EtherscanContractVerifier,
    GitHubVariablePublisher,
    LocalEnvironmentExporter,
    RetryStrategy,
    VariablePublisherPort,
    Web3ContractDeployer,
)
from artwork_deployer.config import (
    AppSettings,
    config_require_etherscan_api_key,
    config_require_remote_publish_settings,
)
from artwork_deployer.jobs import DeployPublishOrchestrator


def bootstrap_create_contract_deployer(settings: AppSettings) -> Web3ContractDeployer:
    """Build the deployment driver from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        Web3ContractDeployer: Configured deployment driver.
    """

    return Web3ContractDeployer(
        rpc_url=settings.rpc_url,
        private_key=settings.deployer_private_key.get_secret_value(),
        artifact_path=settings.contract_artifact_path,
        contract_name=settings.contract_name,
        network_name=settings.network_name,
        chain_id=settings.chain_id,
        request_timeout_seconds=settings.rpc_request_timeout_seconds,
        confirmation_timeout_seconds=settings.deploy_confirmation_timeout_seconds,
        poll_latency_seconds=settings.deploy_poll_latency_seconds,
    )


def bootstrap_create_publishers(settings: AppSettings) -> list[VariablePublisherPort]:
    """Build enabled address sinks in publish order: local export, then remote.

    Args:
        settings: Validated runtime settings.

    Returns:
        list[VariablePublisherPort]: Zero, one, or two publishers.

    Raises:
        SettingsLoadError: Raised when remote publish is enabled without its target values.
    """

    publishers: list[VariablePublisherPort] = []
    if settings.local_export_enabled:
        publishers.append(
            LocalEnvironmentExporter(
                variable_name=settings.local_export_variable_name,
                output_name=settings.local_export_output_name,
                ci_env_file=settings.github_env,
                ci_output_file=settings.github_output,
            )
        )
    if settings.remote_publish_enabled:
        github_org, github_variable_name, github_token = config_require_remote_publish_settings(settings)
        publishers.append(
            GitHubVariablePublisher(
                org=github_org,
                variable_name=github_variable_name,
                token=github_token,
                api_url=settings.github_api_url,
                api_version=settings.github_api_version,
                request_timeout_seconds=settings.publish_request_timeout_seconds,
                retry_strategy=RetryStrategy(
                    attempts=settings.publish_retry_attempts,
                    backoff_base_seconds=settings.publish_backoff_base_seconds,
                    max_backoff_seconds=settings.publish_backoff_max_seconds,
                ),
            )
        )
    return publishers


def bootstrap_create_deploy_publish_orchestrator(settings: AppSettings) -> DeployPublishOrchestrator:
    """Build the deploy-and-publish orchestrator for the CLI surface.

    Args:
        settings: Validated runtime settings.

    Returns:
        DeployPublishOrchestrator: Fully wired orchestrator instance.
    """

    return DeployPublishOrchestrator(
        contract_deployer=bootstrap_create_contract_deployer(settings),
        publishers=bootstrap_create_publishers(settings),
    )


def bootstrap_create_contract_verifier(settings: AppSettings) -> EtherscanContractVerifier:
    """Build the source verification adapter.

    Args:
        settings: Validated runtime settings.

    Returns:
        EtherscanContractVerifier: Configured verification adapter.

    Raises:
        SettingsLoadError: Raised when ETHERSCAN_API_KEY is missing.
    """

    return EtherscanContractVerifier(
        api_key=config_require_etherscan_api_key(settings),
        api_url=settings.etherscan_api_url,
        poll_attempts=settings.verification_poll_attempts,
        poll_interval_seconds=settings.verification_poll_interval_seconds,
        request_timeout_seconds=settings.publish_request_timeout_seconds,
    )
