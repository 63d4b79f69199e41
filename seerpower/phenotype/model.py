"""
Case probabilities for a single causal element under a target odds ratio

Given the odds ratio (OR) of the element, its frequency in the population
(MAF) and the desired ratio of cases to controls (Sr), these give the
probability that a sampled individual is labelled a case depending on whether
it carries the element. Valid inputs are OR > 0, 0 < MAF < 1 and Sr > 0.
"""

import numpy as np
from typing import Union

ArrayLike = Union[float, np.ndarray]


def prob_case_given_absent(odds_ratio: ArrayLike, maf: ArrayLike, sampling_ratio: ArrayLike) -> ArrayLike:
    """Probability that an individual without the element is a case

    Computes ``1 / ((1 + 1/Sr) * (MAF * (OR - 1) + 1))``. With OR = 1 this
    reduces to ``Sr / (1 + Sr)`` for any MAF.

    Args:
        odds_ratio: Target odds ratio of the element
        maf: Frequency of the element in the population
        sampling_ratio: Target ratio of cases to controls

    Returns:
        Probability (scalar or array, following the inputs)
    """
    return 1.0 / ((1.0 + 1.0 / sampling_ratio) * (maf * (odds_ratio - 1.0) + 1.0))


def prob_case_given_present(odds_ratio: ArrayLike, maf: ArrayLike, sampling_ratio: ArrayLike) -> ArrayLike:
    """Probability that an individual carrying the element is a case"""
    return 1.0 - prob_case_given_absent(odds_ratio, maf, sampling_ratio)
