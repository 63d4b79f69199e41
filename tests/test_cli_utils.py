import json
import sys

import numpy as np
import pytest

from seerpower.cli import utils
from seerpower.cli.main import main


def test_parse_args_requires_two_inputs(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        utils.parse_args(["samples.txt"])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit):
        utils.parse_args(["a", "b", "c"])


def test_parse_args_defaults_leave_config_untouched() -> None:
    args = utils.parse_args(["samples.txt", "mds.npy"])

    assert args.roster == "samples.txt"
    assert args.structure == "mds.npy"
    assert all(getattr(args, name) is None for name in utils.CONFIG_FIELDS)

    config = utils.build_config(args)
    assert config.repeats == 100
    assert config.tool == "./seer"


def test_build_config_merges_file_and_overrides(tmp_path) -> None:
    config_file = tmp_path / "sweep.json"
    config_file.write_text(json.dumps({"repeats": 10, "maf": 0.1, "tool": "/opt/seer"}))

    args = utils.parse_args([
        "samples.txt", "mds.npy",
        "--config", str(config_file),
        "--repeats", "4",
        "--or-start", "1", "--or-end", "3",
        "-k", "kmers.gz",
        "--tool-arg=--maf", "--tool-arg", "0.01",
        "--n-jobs", "2",
        "--seed", "5",
        "--struct-format", "txt",
    ])
    config = utils.build_config(args)

    assert config.repeats == 4
    assert config.maf == 0.1
    assert config.tool == "/opt/seer"
    assert config.or_start == 1.0
    assert config.or_end == 3.0
    assert config.feature_file == "kmers.gz"
    assert config.extra_args == ["--maf", "0.01"]
    assert config.n_jobs == 2
    assert config.seed == 5
    assert config.structure_format == "txt"


def test_main_reports_fatal_input_errors(tmp_path, capsys) -> None:
    code = main([str(tmp_path / "missing.txt"), str(tmp_path / "missing.npy"), "--quiet"])

    assert code == 1
    assert "Roster file not found" in capsys.readouterr().err


@pytest.mark.skipif(sys.platform.startswith("win"), reason="shell script tool")
def test_main_end_to_end_with_script_tool(tmp_path, capsys) -> None:
    roster_file = tmp_path / "samples.txt"
    roster_file.write_text("".join(f"S{i} {int(i % 3 == 0)}\n" for i in range(12)))
    np.save(tmp_path / "mds.npy", np.arange(24, dtype=float).reshape(12, 2))
    tool = tmp_path / "fake_seer.sh"
    # number of cases in the staged phenotype file
    tool.write_text("#!/bin/sh\ngrep -c '1$' \"$4\"\nexit 0\n")
    tool.chmod(0o755)

    code = main([
        str(roster_file), str(tmp_path / "mds.npy"),
        "--tool", str(tool),
        "--or-start", "1", "--or-step", "1", "--or-end", "2",
        "--samples-start", "4", "--samples-step", "4", "--samples-end", "8",
        "--repeats", "2",
        "--seed", "3",
        "--work-dir", str(tmp_path),
        "--output", str(tmp_path / "results.tsv"),
        "--summary", str(tmp_path / "power"),
        "--no-plot",
        "--quiet",
    ])

    assert code == 0
    rows = [line.split("\t") for line in capsys.readouterr().out.splitlines()]
    assert len(rows) == 8
    for odds_ratio, size, repeat, result in rows:
        assert 0 <= int(result) <= int(size)
    assert (tmp_path / "results.tsv").exists()
    assert (tmp_path / "power.power.tsv").exists()
    assert not (tmp_path / "power.power.png").exists()
    leftovers = [p for p in tmp_path.iterdir() if p.name.startswith("seerpower_")]
    assert leftovers == []
