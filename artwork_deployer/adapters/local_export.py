"""Local export of the deployed address for later steps in the same CI job."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import MutableMapping

from artwork_deployer.domain import DeploymentRecord, PublishResult

from .interfaces import VariablePublisherPort

logger = logging.getLogger(__name__)


class LocalEnvironmentExporter(VariablePublisherPort):
    """Expose the deployed address to the current process and later CI steps.

    The address is always set in the given environment mapping. When the CI
    environment file or step output file is configured, a `NAME=value` line
    is appended to it as well.
    """

    def __init__(
        self,
        variable_name: str = "SC_ADDRESS",
        output_name: str = "contract_address",
        ci_env_file: str | Path | None = None,
        ci_output_file: str | Path | None = None,
        environ: MutableMapping[str, str] | None = None,
    ):
        """Initialize local exporter.

        Args:
            variable_name: Environment variable receiving the address.
            output_name: Step output name receiving the address.
            ci_env_file: CI environment file shared with later steps.
            ci_output_file: CI step output file.
            environ: Environment mapping to update; defaults to `os.environ`.

        Raises:
            ValueError: Raised when names are blank or not valid variable names.
        """

        normalized_variable_name = variable_name.strip()
        normalized_output_name = output_name.strip()
        if not normalized_variable_name:
            raise ValueError("variable_name must not be blank")
        if not normalized_output_name:
            raise ValueError("output_name must not be blank")
        for name in (normalized_variable_name, normalized_output_name):
            if "=" in name or "\n" in name:
                raise ValueError(f"invalid export name {name!r}")

        self._variable_name = normalized_variable_name
        self._output_name = normalized_output_name
        self._ci_env_file = Path(ci_env_file) if ci_env_file else None
        self._ci_output_file = Path(ci_output_file) if ci_output_file else None
        self._environ = os.environ if environ is None else environ

    def adapter_sink_name(self) -> str:
        return "local_environment"

    def adapter_publish_address(self, record: DeploymentRecord) -> PublishResult:
        address = record.contract_address
        self._environ[self._variable_name] = address
        exported_to = [f"process:{self._variable_name}"]

        try:
            if self._ci_env_file is not None:
                self._export_append_line(self._ci_env_file, self._variable_name, address)
                exported_to.append(f"ci_env:{self._variable_name}")
            if self._ci_output_file is not None:
                self._export_append_line(self._ci_output_file, self._output_name, address)
                exported_to.append(f"ci_output:{self._output_name}")
        except OSError as error:
            return PublishResult(
                sink=self.adapter_sink_name(),
                success=False,
                detail=f"failed to write CI export file: {error}",
            )

        logger.info("Exported contract address to %s", ", ".join(exported_to))
        return PublishResult(sink=self.adapter_sink_name(), success=True, detail=", ".join(exported_to))

    def _export_append_line(self, path: Path, name: str, value: str) -> None:
        with path.open("a", encoding="utf-8") as export_file:
            export_file.write(f"{name}={value}\n")
