import json

import pytest

from seerpower.config import SweepConfig, inclusive_range


def test_default_config_matches_seer_power_study() -> None:
    config = SweepConfig().validate()

    assert config.odds_ratios() == [0.5, 1.5, 2.5, 3.5, 4.5, 5.5]
    assert config.sample_sizes()[0] == 50
    assert config.sample_sizes()[-1] == 3000
    assert len(config.sample_sizes()) == 60
    assert config.n_trials == 6 * 60 * 100
    assert config.feature_file == "gene_kmers.txt.gz"


def test_inclusive_range_keeps_end_point_with_float_steps() -> None:
    values = inclusive_range(0.1, 0.3, 0.1)

    assert len(values) == 3
    assert values[-1] == pytest.approx(0.3)
    assert inclusive_range(1, 1, 5) == [1]
    assert inclusive_range(2, 1, 1) == []
    with pytest.raises(ValueError):
        inclusive_range(0, 1, 0)


def test_small_grid_counts() -> None:
    config = SweepConfig(or_start=0.5, or_step=1, or_end=1.5,
                         samples_start=50, samples_step=50, samples_end=100, repeats=2)

    assert config.odds_ratios() == [0.5, 1.5]
    assert config.sample_sizes() == [50, 100]
    assert config.n_trials == 8


@pytest.mark.parametrize(
    "overrides",
    [
        {"or_step": 0},
        {"or_start": 0},
        {"or_start": 3.0, "or_end": 2.0},
        {"samples_step": -50},
        {"samples_start": 0},
        {"samples_end": 10},
        {"repeats": 0},
        {"maf": 0.0},
        {"maf": 1.0},
        {"sampling_ratio": 0},
        {"timeout": 0},
        {"n_jobs": 0},
        {"structure_format": "csv"},
        {"seed": -1},
        {"extra_args": "--threads"},
        {"work_dir": "/definitely/not/a/dir"},
    ],
)
def test_validate_rejects_bad_settings(overrides) -> None:
    with pytest.raises(ValueError):
        SweepConfig(**overrides).validate()


def test_updated_ignores_none_and_rejects_unknown_fields() -> None:
    config = SweepConfig(repeats=5)

    updated = config.updated(repeats=None, maf=0.1)

    assert updated.repeats == 5
    assert updated.maf == 0.1
    assert config.maf == 0.25
    with pytest.raises(ValueError, match="Unknown configuration fields"):
        config.updated(odds=2)


def test_config_json_round_trip(tmp_path) -> None:
    path = tmp_path / "sweep.json"
    path.write_text(json.dumps({"or_end": 2.5, "repeats": 3, "tool": "/opt/seer", "extra_args": ["-v"]}))

    config = SweepConfig.from_json(path)

    assert config.or_end == 2.5
    assert config.repeats == 3
    assert config.extra_args == ["-v"]
    assert SweepConfig.from_dict(config.to_dict()) == config

    with pytest.raises(FileNotFoundError):
        SweepConfig.from_json(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]")
    with pytest.raises(ValueError):
        SweepConfig.from_json(bad)
