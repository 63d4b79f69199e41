"""
Power curve plots for sweep summaries
"""

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from typing import Dict, Tuple, Union

from ..data.io_utils import save_sweep_results
from ..utils.data_types import SweepResults
from ..utils.stats import estimate_power


def create_power_curve_plot(summary: pd.DataFrame,
                            title: str = "Power",
                            figsize: Tuple[int, int] = (8, 5),
                            show_ci: bool = True) -> plt.Figure:
    """Plot power against sample size, one line per odds ratio

    Args:
        summary: Output of estimate_power
        title: Plot title
        figsize: Figure size
        show_ci: Shade the confidence interval of each curve

    Returns:
        matplotlib Figure object
    """

    fig, ax = plt.subplots(figsize=figsize)

    valid = summary.dropna(subset=['power']) if not summary.empty else summary
    if valid.empty:
        ax.text(0.5, 0.5, 'No completed trials to plot',
                ha='center', va='center', transform=ax.transAxes)
        ax.set_title(title)
        return fig

    odds_ratios = sorted(valid['OR'].unique())
    palette = sns.color_palette("viridis", n_colors=len(odds_ratios))

    for color, odds_ratio in zip(palette, odds_ratios):
        curve = valid[valid['OR'] == odds_ratio].sort_values('SampleSize')
        ax.plot(curve['SampleSize'], curve['power'], marker='o', markersize=3,
                color=color, label=f"OR = {odds_ratio:g}")
        if show_ci:
            ax.fill_between(curve['SampleSize'], curve['ci_lower'], curve['ci_upper'],
                            color=color, alpha=0.15, linewidth=0)

    ax.set_xlabel('Sample size')
    ax.set_ylabel('Power')
    ax.set_ylim(-0.02, 1.02)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(title='Odds ratio', fontsize='small')
    sns.despine(ax=ax)

    plt.tight_layout()
    return fig


def save_power_report(results: Union[SweepResults, pd.DataFrame],
                      output_prefix: Union[str, Path],
                      min_hits: int = 1,
                      alpha: float = 0.05,
                      dpi: int = 300,
                      save_plot: bool = True,
                      verbose: bool = False) -> Dict[str, Path]:
    """Write the power summary table and power curve figure

    Returns:
        Dictionary of created files keyed by 'summary' and 'plot'
    """
    results_df = results.to_dataframe() if isinstance(results, SweepResults) else results
    summary = estimate_power(results_df, min_hits=min_hits, alpha=alpha)

    output_prefix = Path(output_prefix)
    files_created: Dict[str, Path] = {}

    summary_file = save_sweep_results(summary, f"{output_prefix}.power.tsv")
    files_created['summary'] = summary_file
    if verbose:
        print(f"Saved power summary: {summary_file}")

    if save_plot:
        fig = create_power_curve_plot(summary, title=f"Power (result >= {min_hits})")
        plot_file = Path(f"{output_prefix}.power.png")
        fig.savefig(plot_file, dpi=dpi, bbox_inches='tight')
        plt.close(fig)
        files_created['plot'] = plot_file
        if verbose:
            print(f"Saved power curves: {plot_file}")

    return files_created
