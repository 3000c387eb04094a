"""Tests for settings-to-adapter wiring."""

from __future__ import annotations

import pytest

from artwork_deployer.adapters import EtherscanContractVerifier, Web3ContractDeployer
from artwork_deployer.bootstrap import (
    bootstrap_create_contract_deployer,
    bootstrap_create_contract_verifier,
    bootstrap_create_deploy_publish_orchestrator,
    bootstrap_create_publishers,
)
from artwork_deployer.config import AppSettings, SettingsLoadError
from artwork_deployer.jobs import DeployPublishOrchestrator

from conftest import TEST_PRIVATE_KEY


def _build_settings(**overrides: object) -> AppSettings:
    values: dict[str, object] = {
        "rpc_url": "https://rpc.example.test",
        "deployer_private_key": TEST_PRIVATE_KEY,
        "github_org": "artwork-org",
        "github_variable_name": "ARTWORK_ADDRESS",
        "github_token": "ghp_test_token",
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


@pytest.mark.parametrize(
    ("local_export_enabled", "remote_publish_enabled", "expected_sinks"),
    [
        (False, False, []),
        (True, False, ["local_environment"]),
        (False, True, ["github_org_variable"]),
        (True, True, ["local_environment", "github_org_variable"]),
    ],
)
def test_bootstrap_publishers_follow_enabled_flags_in_fixed_order(
    clean_settings_env: pytest.MonkeyPatch,
    local_export_enabled: bool,
    remote_publish_enabled: bool,
    expected_sinks: list[str],
) -> None:
    """Build zero, one or two sinks with local export always ahead of remote publish.

    Args:
        clean_settings_env: Monkeypatch fixture with settings variables cleared.
        local_export_enabled: Local export flag.
        remote_publish_enabled: Remote publish flag.
        expected_sinks: Expected sink names in publish order.

    Raises:
        AssertionError: Raised when sink selection or order is wrong.
    """

    settings = _build_settings(
        local_export_enabled=local_export_enabled,
        remote_publish_enabled=remote_publish_enabled,
    )

    publishers = bootstrap_create_publishers(settings)

    assert [publisher.adapter_sink_name() for publisher in publishers] == expected_sinks


def test_bootstrap_remote_publisher_requires_github_values(clean_settings_env: pytest.MonkeyPatch) -> None:
    settings = _build_settings(github_org=None, github_token=None)

    with pytest.raises(SettingsLoadError, match="GITHUB_ORG, GITHUB_TOKEN"):
        bootstrap_create_publishers(settings)


def test_bootstrap_remote_publisher_targets_configured_variable(clean_settings_env: pytest.MonkeyPatch) -> None:
    settings = _build_settings(local_export_enabled=False, github_api_url="https://github.example.test/api/v3/")

    (publisher,) = bootstrap_create_publishers(settings)

    assert publisher.adapter_variable_url() == (
        "https://github.example.test/api/v3/orgs/artwork-org/actions/variables/ARTWORK_ADDRESS"
    )


def test_bootstrap_wires_deployer_and_orchestrator(clean_settings_env: pytest.MonkeyPatch) -> None:
    settings = _build_settings(network_name="holesky", remote_publish_enabled=False)

    contract_deployer = bootstrap_create_contract_deployer(settings)
    orchestrator = bootstrap_create_deploy_publish_orchestrator(settings)

    assert isinstance(contract_deployer, Web3ContractDeployer)
    assert contract_deployer.adapter_network_name() == "holesky"
    assert isinstance(orchestrator, DeployPublishOrchestrator)
    assert orchestrator.job_supported_names() == ("deploy_publish",)


def test_bootstrap_verifier_requires_etherscan_key(clean_settings_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(SettingsLoadError, match="ETHERSCAN_API_KEY"):
        bootstrap_create_contract_verifier(_build_settings())

    verifier = bootstrap_create_contract_verifier(_build_settings(etherscan_api_key="etherscan-key"))

    assert isinstance(verifier, EtherscanContractVerifier)
