"""Compiled contract artifact loading for Hardhat and Foundry outputs."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
from pathlib import Path
from typing import Any

from .errors import ContractArtifactError


@dataclass(frozen=True)
class ContractArtifact:
    """Fixed compiled contract used for every deployment of one run.

    Attributes:
        contract_name: Contract name declared in the artifact.
        source_name: Source unit path, e.g. `contracts/Artwork.sol`.
        abi: Contract ABI entries.
        bytecode: 0x-prefixed creation bytecode.
        bytecode_sha256: SHA-256 of the creation bytecode, for log correlation.
        build_info_path: Hardhat build-info file with the compiler input, when present.
    """

    contract_name: str
    source_name: str | None
    abi: list[dict[str, Any]]
    bytecode: str
    bytecode_sha256: str
    build_info_path: Path | None = None

    def artifact_fully_qualified_name(self) -> str:
        """Return `<source>:<contract>` name used by verification services.

        Returns:
            str: Fully qualified contract name, or the bare name when source is unknown.
        """

        if self.source_name:
            return f"{self.source_name}:{self.contract_name}"
        return self.contract_name

    def artifact_load_build_info(self) -> dict[str, Any]:
        """Load the Hardhat build-info document for this artifact.

        Returns:
            dict[str, Any]: Parsed build-info with `input` and `solcLongVersion` keys.

        Raises:
            ContractArtifactError: Raised when build-info is unavailable or incomplete.
        """

        if self.build_info_path is None:
            raise ContractArtifactError(
                f"no build-info available for contract={self.contract_name}; recompile with Hardhat",
                error_code="ARTIFACT_BUILD_INFO_MISSING",
            )
        build_info = _artifact_read_json(self.build_info_path, context_label="build-info")
        if not isinstance(build_info.get("input"), dict):
            raise ContractArtifactError(
                f"build-info {self.build_info_path} has no compiler input",
                error_code="ARTIFACT_BUILD_INFO_INVALID",
            )
        if not str(build_info.get("solcLongVersion") or "").strip():
            raise ContractArtifactError(
                f"build-info {self.build_info_path} has no solcLongVersion",
                error_code="ARTIFACT_BUILD_INFO_INVALID",
            )
        return build_info


def artifact_load_contract(artifact_path: str | Path, expected_contract_name: str | None = None) -> ContractArtifact:
    """Load and validate a compiled contract artifact.

    Accepts Hardhat artifacts (`bytecode` as a hex string) and Foundry
    artifacts (`bytecode.object`).

    Args:
        artifact_path: Artifact JSON path.
        expected_contract_name: Contract name the artifact must declare, when it declares one.

    Returns:
        ContractArtifact: Validated immutable artifact.

    Raises:
        ContractArtifactError: Raised when the artifact is missing, invalid, or for another contract.
    """

    path = Path(artifact_path)
    payload = _artifact_read_json(path, context_label="artifact")

    abi = payload.get("abi")
    if not isinstance(abi, list) or not abi:
        raise ContractArtifactError(f"artifact {path} is missing an ABI", error_code="ARTIFACT_ABI_MISSING")

    bytecode_value = payload.get("bytecode")
    if isinstance(bytecode_value, dict):
        bytecode_value = bytecode_value.get("object")
    bytecode = str(bytecode_value or "").strip()
    if bytecode and not bytecode.startswith("0x"):
        bytecode = f"0x{bytecode}"
    if bytecode in ("", "0x"):
        raise ContractArtifactError(
            f"artifact {path} has empty creation bytecode (abstract contract or interface?)",
            error_code="ARTIFACT_BYTECODE_MISSING",
        )

    declared_name = str(payload.get("contractName") or "").strip()
    if expected_contract_name and declared_name and declared_name != expected_contract_name:
        raise ContractArtifactError(
            f"artifact {path} declares contract={declared_name}, expected {expected_contract_name}",
            error_code="ARTIFACT_NAME_MISMATCH",
        )
    contract_name = declared_name or expected_contract_name or path.stem
    source_name = str(payload.get("sourceName") or "").strip() or None

    return ContractArtifact(
        contract_name=contract_name,
        source_name=source_name,
        abi=abi,
        bytecode=bytecode,
        bytecode_sha256=hashlib.sha256(bytecode.encode("ascii")).hexdigest(),
        build_info_path=_artifact_resolve_build_info_path(path),
    )


def _artifact_resolve_build_info_path(artifact_path: Path) -> Path | None:
    # Hardhat writes <Name>.dbg.json next to <Name>.json with a relative buildInfo path.
    debug_path = artifact_path.with_name(f"{artifact_path.stem}.dbg.json")
    if not debug_path.is_file():
        return None
    debug_payload = _artifact_read_json(debug_path, context_label="debug")
    build_info_reference = str(debug_payload.get("buildInfo") or "").strip()
    if not build_info_reference:
        return None
    return (debug_path.parent / build_info_reference).resolve()


def _artifact_read_json(path: Path, context_label: str) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise ContractArtifactError(
            f"{context_label} file not found at {path}; compile the contract first",
            error_code="ARTIFACT_NOT_FOUND",
        ) from error
    except (OSError, json.JSONDecodeError) as error:
        raise ContractArtifactError(
            f"{context_label} file {path} could not be parsed",
            error_code="ARTIFACT_INVALID",
        ) from error
    if not isinstance(payload, dict):
        raise ContractArtifactError(f"{context_label} file {path} is not a JSON object", error_code="ARTIFACT_INVALID")
    return payload
