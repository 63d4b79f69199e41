"""
Statistical utilities for summarizing power sweeps
"""

import numpy as np
import pandas as pd
from typing import Tuple, Union
from scipy import stats

SUMMARY_COLUMNS = ['OR', 'SampleSize', 'n_trials', 'n_detected', 'n_failed',
                   'power', 'ci_lower', 'ci_upper']


def clopper_pearson_interval(successes: Union[int, np.ndarray],
                             trials: Union[int, np.ndarray],
                             alpha: float = 0.05) -> Tuple[np.ndarray, np.ndarray]:
    """Exact (Clopper-Pearson) confidence interval for a binomial proportion

    Args:
        successes: Number of successes
        trials: Number of trials
        alpha: 1 - confidence level (default: 0.05)

    Returns:
        Tuple of (lower, upper) bounds; NaN where trials == 0
    """
    successes = np.asarray(successes, dtype=np.float64)
    trials = np.asarray(trials, dtype=np.float64)

    with np.errstate(invalid='ignore', divide='ignore'):
        lower = stats.beta.ppf(alpha / 2, successes, trials - successes + 1)
        upper = stats.beta.ppf(1 - alpha / 2, successes + 1, trials - successes)

    lower = np.where(successes == 0, 0.0, lower)
    upper = np.where(successes == trials, 1.0, upper)
    empty = trials == 0
    lower = np.where(empty, np.nan, lower)
    upper = np.where(empty, np.nan, upper)

    return lower, upper


def estimate_power(results_df: pd.DataFrame,
                   min_hits: int = 1,
                   alpha: float = 0.05) -> pd.DataFrame:
    """Detection rate per (odds ratio, sample size) cell

    A trial counts as a detection when the tool's result is at least
    ``min_hits``. Failed trials (missing Result) are excluded from the
    denominator and reported separately.

    Args:
        results_df: Table with columns OR, SampleSize, Result
        min_hits: Smallest result counted as a detection
        alpha: 1 - confidence level of the reported interval

    Returns:
        DataFrame with SUMMARY_COLUMNS, one row per cell, sorted by OR then size
    """
    if results_df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    frame = results_df[['OR', 'SampleSize', 'Result']].copy()
    result = pd.to_numeric(frame['Result'], errors='coerce')
    frame['ok'] = result.notna()
    frame['failed'] = ~frame['ok']
    frame['detected'] = frame['ok'] & (result.astype(float).fillna(-np.inf) >= min_hits)

    grouped = frame.groupby(['OR', 'SampleSize'], sort=True)
    summary = pd.DataFrame({
        'n_trials': grouped['ok'].sum().astype(int),
        'n_detected': grouped['detected'].sum().astype(int),
        'n_failed': grouped['failed'].sum().astype(int),
    }).reset_index()

    summary['power'] = summary['n_detected'] / summary['n_trials'].replace(0, np.nan)
    lower, upper = clopper_pearson_interval(summary['n_detected'], summary['n_trials'], alpha=alpha)
    summary['ci_lower'] = lower
    summary['ci_upper'] = upper

    return summary[SUMMARY_COLUMNS]
