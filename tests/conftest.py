"""Shared fixtures for deployment pipeline tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

TEST_PRIVATE_KEY = "0x" + "11" * 32

SETTINGS_ENV_NAMES = (
    "RPC_URL",
    "DEPLOYER_PRIVATE_KEY",
    "ETHERSCAN_API_KEY",
    "GITHUB_ORG",
    "GITHUB_VARIABLE_NAME",
    "GITHUB_TOKEN",
    "NETWORK_NAME",
    "CHAIN_ID",
    "CONTRACT_NAME",
    "CONTRACT_ARTIFACT_PATH",
    "LOCAL_EXPORT_ENABLED",
    "LOCAL_EXPORT_VARIABLE_NAME",
    "GITHUB_ENV",
    "GITHUB_OUTPUT",
    "REMOTE_PUBLISH_ENABLED",
    "PUBLISH_RETRY_ATTEMPTS",
    "PUBLISH_BACKOFF_BASE_SECONDS",
    "PUBLISH_BACKOFF_MAX_SECONDS",
)


@pytest.fixture
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every settings variable so tests control the environment fully.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The same monkeypatch fixture for chaining.
    """

    for env_name in SETTINGS_ENV_NAMES:
        monkeypatch.delenv(env_name, raising=False)
    return monkeypatch


@pytest.fixture
def hardhat_artifact_path(tmp_path: Path) -> Path:
    """Write a minimal Hardhat artifact tree with debug and build-info files.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        Path: Artifact JSON path.
    """

    artifact_dir = tmp_path / "artifacts" / "contracts" / "Artwork.sol"
    build_info_dir = tmp_path / "artifacts" / "build-info"
    artifact_dir.mkdir(parents=True)
    build_info_dir.mkdir(parents=True)

    artifact_path = artifact_dir / "Artwork.json"
    artifact_path.write_text(
        json.dumps(
            {
                "_format": "hh-sol-artifact-1",
                "contractName": "Artwork",
                "sourceName": "contracts/Artwork.sol",
                "abi": [{"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}],
                "bytecode": "0x6080604052348015600f57600080fd5b50",
            }
        ),
        encoding="utf-8",
    )
    (artifact_dir / "Artwork.dbg.json").write_text(
        json.dumps({"_format": "hh-sol-dbg-1", "buildInfo": "../../build-info/abc123.json"}),
        encoding="utf-8",
    )
    (build_info_dir / "abc123.json").write_text(
        json.dumps(
            {
                "solcVersion": "0.8.18",
                "solcLongVersion": "0.8.18+commit.87f61d96",
                "input": {"language": "Solidity", "sources": {"contracts/Artwork.sol": {"content": "contract Artwork {}"}}},
            }
        ),
        encoding="utf-8",
    )
    return artifact_path
