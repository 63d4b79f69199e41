import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

from seerpower.utils.data_types import SweepResults, TrialResult
from seerpower.utils.stats import estimate_power
from seerpower.visualization import power_curves


def _results() -> SweepResults:
    trials = []
    for odds_ratio in (1.0, 3.0):
        for size in (50, 100):
            for repeat in range(1, 5):
                hits = int(odds_ratio > 1 and repeat <= size // 50 + 1)
                trials.append(TrialResult(odds_ratio, size, repeat, result=hits))
    return SweepResults(trials)


def test_create_power_curve_plot_returns_figure() -> None:
    summary = estimate_power(_results().to_dataframe())

    fig = power_curves.create_power_curve_plot(summary, title="Power")

    assert isinstance(fig, matplotlib.figure.Figure)
    assert len(fig.axes[0].get_lines()) == 2
    plt.close(fig)


def test_create_power_curve_plot_handles_empty_summary() -> None:
    fig = power_curves.create_power_curve_plot(pd.DataFrame(columns=["OR", "SampleSize", "power"]))

    assert isinstance(fig, matplotlib.figure.Figure)
    plt.close(fig)


def test_save_power_report_writes_files(tmp_path) -> None:
    files = power_curves.save_power_report(_results(), tmp_path / "sweep", min_hits=1, dpi=50)

    assert files["summary"].exists()
    assert files["plot"].exists()
    summary = pd.read_csv(files["summary"], sep="\t")
    assert len(summary) == 4
