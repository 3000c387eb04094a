"""Main module entrypoint for deploying and publishing the Artwork contract.

This module validates startup configuration, runs the selected command and
maps its outcome to the process exit status.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from artwork_deployer.adapters import artifact_load_contract
from artwork_deployer.bootstrap import (
    bootstrap_create_contract_deployer,
    bootstrap_create_contract_verifier,
    bootstrap_create_deploy_publish_orchestrator,
)
from artwork_deployer.config import (
    AppSettings,
    SettingsLoadError,
    config_load_settings,
    config_require_remote_publish_settings,
)
from artwork_deployer.jobs import JobExecutionResult

logger = logging.getLogger("artwork_deployer")


def main_setup_logging(level_name: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Run selected command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Raises:
        SystemExit: Raised with status 1 when configuration, deployment,
            publishing or verification fails.
    """

    argument_parser = argparse.ArgumentParser(description="Artwork contract deployment entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="deploy",
        choices=("deploy", "verify"),
        help="Runtime command: `deploy` deploys the contract and publishes its address, "
        "`verify` submits the deployed source for verification",
        type=str,
    )
    argument_parser.add_argument(
        "--address",
        dest="address",
        type=str,
        help="Deployed contract address, required for `verify`",
    )
    argument_parser.add_argument(
        "--env-file",
        dest="env_file",
        default=".env",
        type=str,
        help="Dotenv file to read settings from; pass an empty value to read the environment only",
    )
    argument_parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="Logging level",
    )
    parsed_arguments = argument_parser.parse_args(argv)
    if parsed_arguments.command == "verify" and not (parsed_arguments.address or "").strip():
        argument_parser.error("--address is required for `verify`")

    main_setup_logging(parsed_arguments.log_level)

    try:
        settings = config_load_settings(env_file=parsed_arguments.env_file or None)
    except SettingsLoadError as error:
        logger.error("%s", error)
        raise SystemExit(1) from error

    if parsed_arguments.command == "verify":
        main_run_verify(settings=settings, contract_address=parsed_arguments.address.strip())
        return

    main_run_deploy(settings=settings)


def main_run_deploy(settings: AppSettings) -> JobExecutionResult:
    """Run the deploy-and-publish workflow once.

    Args:
        settings: Validated runtime settings.

    Returns:
        JobExecutionResult: Successful execution result.

    Raises:
        SystemExit: Raised with status 1 when the workflow fails.
    """

    try:
        if settings.remote_publish_enabled:
            config_require_remote_publish_settings(settings)
        orchestrator = bootstrap_create_deploy_publish_orchestrator(settings)
    except (ValueError, SettingsLoadError) as error:
        logger.error("Deployment setup failed: %s", error)
        raise SystemExit(1) from error

    execution_result = orchestrator.job_execute(job_name="deploy_publish")
    logger.debug("Run timeline: %s", json.dumps(list(execution_result.timeline), default=str))
    if execution_result.status != "success":
        if execution_result.job_is_partial_success() and execution_result.deployment is not None:
            logger.error(
                "Run failed after deployment [%s]; contract %s exists on %s and must be published manually",
                execution_result.error_code,
                execution_result.deployment.contract_address,
                execution_result.deployment.network,
            )
        else:
            logger.error("Run failed [%s]: %s", execution_result.error_code, execution_result.error_message)
        raise SystemExit(1)
    return execution_result


def main_run_verify(settings: AppSettings, contract_address: str) -> None:
    """Submit a deployed contract's source for verification.

    Args:
        settings: Validated runtime settings.
        contract_address: Deployed contract address.

    Raises:
        SystemExit: Raised with status 1 when verification fails.
    """

    try:
        verifier = bootstrap_create_contract_verifier(settings)
        contract_deployer = bootstrap_create_contract_deployer(settings)
        artifact = artifact_load_contract(settings.contract_artifact_path, expected_contract_name=settings.contract_name)
        chain_id = settings.chain_id or contract_deployer.adapter_resolve_chain_id()
        verification_result = verifier.adapter_verify_contract(
            contract_address=contract_address,
            artifact=artifact,
            chain_id=chain_id,
        )
    except (TimeoutError, ConnectionError, ValueError, RuntimeError) as error:
        logger.error("Verification failed for %s: %s", contract_address, error)
        raise SystemExit(1) from error

    logger.info("Verification of %s finished: %s", contract_address, verification_result.status)


if __name__ == "__main__":
    main()
