import numpy as np
import pandas as pd
import pytest

from seerpower.utils.data_types import PopulationRoster, SweepResults, TrialParameters, TrialResult


def test_population_roster_properties_and_subset() -> None:
    roster = PopulationRoster(pd.DataFrame({"name": ["A", "B", "C"], "flag": [0, 1, "1"]}))

    assert roster.n_samples == len(roster) == 3
    assert list(roster.data.columns) == ["ID", "Present"]
    np.testing.assert_array_equal(roster.element_present, [False, True, True])

    subset = roster.subset([2, 0])
    assert subset["ID"].tolist() == ["C", "A"]


def test_population_roster_validates_shape_and_flags() -> None:
    with pytest.raises(ValueError, match="2 columns"):
        PopulationRoster(pd.DataFrame({"a": [1], "b": [1], "c": [1]}))
    with pytest.raises(ValueError, match="0 or 1"):
        PopulationRoster([("A", 2)])


def test_trial_result_rows() -> None:
    ok = TrialResult(0.5, 50, 1, result=3)
    failed = TrialResult(1.5, 100, 2, error="ToolTimeoutError: slow")

    assert ok.ok
    assert ok.to_row() == "0.5\t50\t1\t3"
    assert not failed.ok
    assert failed.to_row() == "1.5\t100\t2\tERROR"
    assert failed.parameters == TrialParameters(1.5, 100, 2)


def test_trial_result_row_keeps_full_odds_ratio_precision() -> None:
    assert TrialResult(1.2345678, 50, 0, result=1).to_row() == "1.2345678\t50\t0\t1"
    assert TrialResult(2.0, 50, 0, result=1).to_row() == "2\t50\t0\t1"


def test_sweep_results_sorted_dataframe() -> None:
    results = SweepResults([
        TrialResult(1.5, 50, 1, result=2),
        TrialResult(0.5, 100, 1, error="boom"),
        TrialResult(0.5, 50, 2, result=0),
        TrialResult(0.5, 50, 1, result=1),
    ])

    df = results.to_dataframe()

    assert len(results) == 4
    assert results.n_failed == 1
    assert list(df.columns) == ["OR", "SampleSize", "Repeat", "Result", "Error"]
    assert list(zip(df["OR"], df["SampleSize"], df["Repeat"])) == [
        (0.5, 50, 1), (0.5, 50, 2), (0.5, 100, 1), (1.5, 50, 1)
    ]
    assert str(df["Result"].dtype) == "Int64"
    assert df["Result"].isna().tolist() == [False, False, True, False]


def test_empty_sweep_results_dataframe() -> None:
    df = SweepResults([]).to_dataframe()

    assert df.empty
    assert list(df.columns) == ["OR", "SampleSize", "Repeat", "Result", "Error"]
