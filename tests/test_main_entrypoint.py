"""Tests for CLI entrypoint exit status and outcome logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import artwork_deployer.main as main_module
from artwork_deployer.adapters import ContractArtifact, VerificationFailedError
from artwork_deployer.domain import DeploymentRecord, PipelineState, VerificationResult
from artwork_deployer.jobs import PUBLISH_FAILED_AFTER_DEPLOY_CODE, JobExecutionResult

from conftest import TEST_PRIVATE_KEY

_DEPLOYED_ADDRESS = "0xABC0000000000000000000000000000000000123"


class _OrchestratorStub:
    """Orchestrator stub returning one preconfigured execution result."""

    def __init__(self, result: JobExecutionResult):
        self.result = result
        self.executed_job_names: list[str] = []

    def job_execute(self, job_name: str) -> JobExecutionResult:
        self.executed_job_names.append(job_name)
        return self.result


def _build_deployment() -> DeploymentRecord:
    return DeploymentRecord(
        contract_address=_DEPLOYED_ADDRESS,
        network="sepolia",
        chain_id=11155111,
        contract_name="Artwork",
        transaction_hash="0x" + "ab" * 32,
        deployer_address="0x" + "11" * 20,
        block_number=7,
        deployed_at_utc="2026-10-18T00:00:00+00:00",
    )


def _set_minimal_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RPC_URL", "https://rpc.example.test")
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setenv("REMOTE_PUBLISH_ENABLED", "false")


def _install_orchestrator(monkeypatch: pytest.MonkeyPatch, result: JobExecutionResult) -> _OrchestratorStub:
    orchestrator = _OrchestratorStub(result)
    monkeypatch.setattr(
        main_module,
        "bootstrap_create_deploy_publish_orchestrator",
        lambda settings: orchestrator,
    )
    return orchestrator


def test_main_missing_signing_key_exits_before_bootstrap(clean_settings_env: pytest.MonkeyPatch) -> None:
    """Exit with status 1 and never build adapters when configuration is incomplete.

    Args:
        clean_settings_env: Monkeypatch fixture with settings variables cleared.

    Raises:
        AssertionError: Raised when startup proceeds past configuration.
    """

    clean_settings_env.setenv("RPC_URL", "https://rpc.example.test")
    clean_settings_env.setenv("REMOTE_PUBLISH_ENABLED", "false")
    bootstrap_calls: list[object] = []
    clean_settings_env.setattr(
        main_module,
        "bootstrap_create_deploy_publish_orchestrator",
        lambda settings: bootstrap_calls.append(settings),
    )

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["deploy", "--env-file", ""])

    assert exit_info.value.code == 1
    assert bootstrap_calls == []


def test_main_successful_run_returns_without_exit(clean_settings_env: pytest.MonkeyPatch) -> None:
    _set_minimal_env(clean_settings_env)
    orchestrator = _install_orchestrator(
        clean_settings_env,
        JobExecutionResult(
            job_name="deploy_publish",
            status="success",
            state=PipelineState.DONE,
            deployment=_build_deployment(),
        ),
    )

    main_module.main(["--env-file", ""])

    assert orchestrator.executed_job_names == ["deploy_publish"]


def test_main_publish_failure_exits_and_logs_deployed_address(
    clean_settings_env: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Exit with status 1 while keeping the deployed address in the error log.

    Args:
        clean_settings_env: Monkeypatch fixture with settings variables cleared.
        caplog: Pytest log capture fixture.

    Raises:
        AssertionError: Raised when partial success is not surfaced.
    """

    caplog.set_level(logging.INFO)
    _set_minimal_env(clean_settings_env)
    _install_orchestrator(
        clean_settings_env,
        JobExecutionResult(
            job_name="deploy_publish",
            status="failed",
            state=PipelineState.FAILED,
            deployment=_build_deployment(),
            error_code=PUBLISH_FAILED_AFTER_DEPLOY_CODE,
            error_message="github_org_variable: HTTP 403",
        ),
    )

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["deploy", "--env-file", ""])

    assert exit_info.value.code == 1
    error_messages = [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR]
    assert any(_DEPLOYED_ADDRESS in message for message in error_messages)


def test_main_deploy_failure_exits_with_error_code_logged(
    clean_settings_env: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    _set_minimal_env(clean_settings_env)
    _install_orchestrator(
        clean_settings_env,
        JobExecutionResult(
            job_name="deploy_publish",
            status="failed",
            state=PipelineState.FAILED,
            error_code="DEPLOY_TIMEOUT_ERROR",
            error_message="not confirmed",
        ),
    )

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["deploy", "--env-file", ""])

    assert exit_info.value.code == 1
    assert "DEPLOY_TIMEOUT_ERROR" in caplog.text


def test_main_verify_requires_address() -> None:
    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["verify"])

    assert exit_info.value.code == 2


def test_main_verify_without_etherscan_key_exits(clean_settings_env: pytest.MonkeyPatch) -> None:
    _set_minimal_env(clean_settings_env)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["verify", "--address", _DEPLOYED_ADDRESS, "--env-file", ""])

    assert exit_info.value.code == 1


class _VerifierStub:
    """Verifier stub capturing submissions and returning or raising a configured outcome."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.submissions: list[tuple[str, ContractArtifact, int]] = []

    def adapter_verify_contract(self, contract_address: str, artifact: ContractArtifact, chain_id: int) -> VerificationResult:
        self.submissions.append((contract_address, artifact, chain_id))
        if self.error is not None:
            raise self.error
        return VerificationResult(contract_address=contract_address, guid="guid-123", status="Pass - Verified")


class _ChainIdResolverStub:
    """Deployer stub exposing only chain id resolution."""

    def __init__(self, chain_id: int = 11155111):
        self.chain_id = chain_id
        self.resolve_calls = 0

    def adapter_resolve_chain_id(self) -> int:
        self.resolve_calls += 1
        return self.chain_id


def _install_verify_stubs(
    monkeypatch: pytest.MonkeyPatch,
    verifier: _VerifierStub,
    resolver: _ChainIdResolverStub,
) -> None:
    monkeypatch.setattr(main_module, "bootstrap_create_contract_verifier", lambda settings: verifier)
    monkeypatch.setattr(main_module, "bootstrap_create_contract_deployer", lambda settings: resolver)


def _set_verify_env(monkeypatch: pytest.MonkeyPatch, artifact_path: Path) -> None:
    # remote publish keeps its default, and no GitHub values are set
    monkeypatch.setenv("RPC_URL", "https://rpc.example.test")
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setenv("ETHERSCAN_API_KEY", "etherscan-key")
    monkeypatch.setenv("CONTRACT_ARTIFACT_PATH", str(artifact_path))


def test_main_verify_succeeds_without_github_settings(
    clean_settings_env: pytest.MonkeyPatch,
    hardhat_artifact_path: Path,
) -> None:
    """Verify a deployed contract using RPC chain id when no GitHub values are configured.

    Args:
        clean_settings_env: Monkeypatch fixture with settings variables cleared.
        hardhat_artifact_path: Artifact fixture path.

    Raises:
        AssertionError: Raised when verify does not complete cleanly.
    """

    _set_verify_env(clean_settings_env, hardhat_artifact_path)
    verifier = _VerifierStub()
    resolver = _ChainIdResolverStub(chain_id=11155111)
    _install_verify_stubs(clean_settings_env, verifier, resolver)

    main_module.main(["verify", "--address", _DEPLOYED_ADDRESS, "--env-file", ""])

    assert resolver.resolve_calls == 1
    assert len(verifier.submissions) == 1
    contract_address, artifact, chain_id = verifier.submissions[0]
    assert contract_address == _DEPLOYED_ADDRESS
    assert artifact.contract_name == "Artwork"
    assert chain_id == 11155111


def test_main_verify_prefers_configured_chain_id(
    clean_settings_env: pytest.MonkeyPatch,
    hardhat_artifact_path: Path,
) -> None:
    _set_verify_env(clean_settings_env, hardhat_artifact_path)
    clean_settings_env.setenv("CHAIN_ID", "17000")
    verifier = _VerifierStub()
    resolver = _ChainIdResolverStub()
    _install_verify_stubs(clean_settings_env, verifier, resolver)

    main_module.main(["verify", "--address", _DEPLOYED_ADDRESS, "--env-file", ""])

    assert resolver.resolve_calls == 0
    assert verifier.submissions[0][2] == 17000


def test_main_verify_failure_exits_with_status_one(
    clean_settings_env: pytest.MonkeyPatch,
    hardhat_artifact_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    _set_verify_env(clean_settings_env, hardhat_artifact_path)
    verifier = _VerifierStub(error=VerificationFailedError("Fail - Unable to verify"))
    _install_verify_stubs(clean_settings_env, verifier, _ChainIdResolverStub())

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["verify", "--address", _DEPLOYED_ADDRESS, "--env-file", ""])

    assert exit_info.value.code == 1
    assert "Unable to verify" in caplog.text


def test_main_deploy_with_incomplete_remote_publish_settings_exits_before_bootstrap(
    clean_settings_env: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    clean_settings_env.setenv("RPC_URL", "https://rpc.example.test")
    clean_settings_env.setenv("DEPLOYER_PRIVATE_KEY", TEST_PRIVATE_KEY)
    clean_settings_env.setenv("GITHUB_ORG", "artwork-org")
    bootstrap_calls: list[object] = []
    clean_settings_env.setattr(
        main_module,
        "bootstrap_create_deploy_publish_orchestrator",
        lambda settings: bootstrap_calls.append(settings),
    )

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["deploy", "--env-file", ""])

    assert exit_info.value.code == 1
    assert bootstrap_calls == []
    assert "GITHUB_VARIABLE_NAME, GITHUB_TOKEN" in caplog.text
