import subprocess
import sys
from unittest.mock import patch

import pytest

from seerpower.association.external import (
    ExternalAssociationTool,
    ToolExecutionError,
    ToolOutputError,
    ToolTimeoutError,
    parse_tool_output,
)
from seerpower.config import SweepConfig


def test_build_command_uses_seer_flags() -> None:
    tool = ExternalAssociationTool("./seer", "gene_kmers.txt.gz", extra_args=["--threads", 2])

    command = tool.build_command("/tmp/p.pheno", "/tmp/s.npy")

    assert command == [
        "./seer", "-k", "gene_kmers.txt.gz", "-p", "/tmp/p.pheno",
        "--struct", "/tmp/s.npy", "--threads", "2",
    ]


def test_from_config_copies_tool_settings() -> None:
    config = SweepConfig(tool="/opt/seer", feature_file="k.gz", extra_args=["--print-samples"], timeout=30)

    tool = ExternalAssociationTool.from_config(config)

    assert tool.executable == "/opt/seer"
    assert tool.feature_file == "k.gz"
    assert tool.extra_args == ["--print-samples"]
    assert tool.timeout == 30


def test_parse_tool_output() -> None:
    assert parse_tool_output("  17\n") == 17
    assert parse_tool_output("0") == 0
    with pytest.raises(ToolOutputError):
        parse_tool_output("")
    with pytest.raises(ToolOutputError, match="integer"):
        parse_tool_output("Segmentation fault")


@patch("seerpower.association.external.subprocess.run")
def test_run_parses_stdout(mock_run) -> None:
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="12\n", stderr="")
    tool = ExternalAssociationTool("seer", "k.gz", timeout=5)

    assert tool.run("p.pheno", "s.npy") == 12
    args, kwargs = mock_run.call_args
    assert args[0][0] == "seer"
    assert kwargs["timeout"] == 5
    assert kwargs["capture_output"] is True


@patch("seerpower.association.external.subprocess.run")
def test_run_reports_non_zero_exit(mock_run) -> None:
    mock_run.return_value = subprocess.CompletedProcess(
        args=[], returncode=1, stdout="", stderr="loading\nCould not open phenotype file\n"
    )

    with pytest.raises(ToolExecutionError, match="Could not open phenotype file"):
        ExternalAssociationTool("seer", "k.gz").run("p", "s")


@patch("seerpower.association.external.subprocess.run")
def test_run_reports_timeout(mock_run) -> None:
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="seer", timeout=2)

    with pytest.raises(ToolTimeoutError, match="2s"):
        ExternalAssociationTool("seer", "k.gz", timeout=2).run("p", "s")


def test_run_missing_executable(tmp_path) -> None:
    tool = ExternalAssociationTool(str(tmp_path / "no_such_tool"), "k.gz")

    with pytest.raises(ToolExecutionError, match="Could not start"):
        tool.run("p", "s")


@pytest.mark.skipif(sys.platform.startswith("win"), reason="shell script tool")
def test_run_real_process_reads_phenotype_file(tmp_path) -> None:
    script = tmp_path / "fake_seer.sh"
    script.write_text('#!/bin/sh\ntest -f "$6" || exit 3\nwc -l < "$4"\n')
    script.chmod(0o755)
    pheno = tmp_path / "p.pheno"
    pheno.write_text("A\t0\nB\t1\nC\t1\n")
    struct = tmp_path / "s.npy"
    struct.write_bytes(b"")

    tool = ExternalAssociationTool(str(script), "k.gz", timeout=30)

    assert tool.run(pheno, struct) == 3
    with pytest.raises(ToolExecutionError, match="status 3"):
        tool.run(pheno, tmp_path / "missing.npy")
