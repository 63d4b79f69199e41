"""Wrapper around the external association tool whose power is being measured"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union


class ExternalToolError(RuntimeError):
    """The external tool could not produce a usable result."""


class ToolExecutionError(ExternalToolError):
    """The tool could not be started or exited with a non-zero status."""


class ToolTimeoutError(ExternalToolError):
    """The tool did not finish within the allotted time."""


class ToolOutputError(ExternalToolError):
    """The tool's standard output is not a single integer."""


def parse_tool_output(stdout: str) -> int:
    """Parse the tool's captured standard output as one integer."""
    text = stdout.strip()
    try:
        return int(text)
    except ValueError:
        preview = text if len(text) <= 80 else text[:77] + "..."
        raise ToolOutputError(f"Expected an integer from the association tool, got '{preview}'") from None


@dataclass
class ExternalAssociationTool:
    """Command line of the form ``<executable> -k <features> -p <pheno> --struct <struct>``."""

    executable: str = "./seer"
    feature_file: str = "gene_kmers.txt.gz"
    extra_args: List[str] = field(default_factory=list)
    timeout: Optional[float] = None

    def build_command(self, phenotype_file: Union[str, Path], structure_file: Union[str, Path]) -> List[str]:
        return [
            str(self.executable),
            "-k", str(self.feature_file),
            "-p", str(phenotype_file),
            "--struct", str(structure_file),
            *[str(arg) for arg in self.extra_args],
        ]

    def run(self, phenotype_file: Union[str, Path], structure_file: Union[str, Path]) -> int:
        """Run the tool once on staged files and return its integer result."""

        command = self.build_command(phenotype_file, structure_file)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ToolTimeoutError(
                f"{self.executable} did not finish within {self.timeout:g}s"
            ) from None
        except OSError as e:
            raise ToolExecutionError(f"Could not start {self.executable}: {e}") from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip().splitlines()
            detail = f": {stderr[-1]}" if stderr else ""
            raise ToolExecutionError(
                f"{self.executable} exited with status {completed.returncode}{detail}"
            )

        return parse_tool_output(completed.stdout)

    @classmethod
    def from_config(cls, config) -> "ExternalAssociationTool":
        return cls(
            executable=config.tool,
            feature_file=config.feature_file,
            extra_args=list(config.extra_args),
            timeout=config.timeout,
        )
