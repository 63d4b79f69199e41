"""
Core data structures for seerpower
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Union

import numpy as np
import pandas as pd

FAILURE_MARKER = "ERROR"
RESULT_COLUMNS = ["OR", "SampleSize", "Repeat", "Result", "Error"]


class PopulationRoster:
    """Individuals of the source population and whether each carries the element

    Expected format: n x 2 table where:
    - Column 1: Individual names
    - Column 2: Element presence (0/1)

    Row order is the identity used to align with the structure matrix.
    """

    def __init__(self, data: Union[pd.DataFrame, Sequence[tuple]]):
        if isinstance(data, pd.DataFrame):
            frame = data.copy()
        else:
            frame = pd.DataFrame(list(data))

        if frame.shape[1] != 2:
            raise ValueError(f"Roster must have 2 columns, got {frame.shape[1]}")

        frame.columns = ['ID', 'Present']
        frame['ID'] = frame['ID'].astype(str)

        present = pd.to_numeric(frame['Present'], errors='coerce')
        invalid = ~present.isin([0, 1])
        if invalid.any():
            examples = frame.loc[invalid, 'Present'].astype(str).unique()[:5]
            raise ValueError(f"Element presence must be 0 or 1 (e.g. got {', '.join(examples)})")
        frame['Present'] = present.astype(bool)

        self.data = frame.reset_index(drop=True)

    @property
    def names(self) -> pd.Series:
        """Individual names"""
        return self.data['ID']

    @property
    def element_present(self) -> np.ndarray:
        """Boolean presence flag per individual"""
        return self.data['Present'].to_numpy(dtype=bool)

    @property
    def n_samples(self) -> int:
        """Number of individuals"""
        return len(self.data)

    def subset(self, indices: Sequence[int]) -> pd.DataFrame:
        """Rows for the given indices, in the given order"""
        return self.data.iloc[np.asarray(indices, dtype=np.int64)].reset_index(drop=True)

    def __len__(self) -> int:
        return self.n_samples


class TrialParameters(NamedTuple):
    """One cell of the sweep grid; repeat is 1-based"""

    odds_ratio: float
    sample_size: int
    repeat: int


@dataclass
class TrialResult:
    """Outcome of a single trial."""

    odds_ratio: float
    sample_size: int
    repeat: int
    result: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None

    @property
    def parameters(self) -> TrialParameters:
        return TrialParameters(self.odds_ratio, self.sample_size, self.repeat)

    def to_row(self) -> str:
        value = str(self.result) if self.ok else FAILURE_MARKER
        # .15g keeps configured odds ratios exact
        return f"{self.odds_ratio:.15g}\t{self.sample_size}\t{self.repeat}\t{value}"

    def to_record(self) -> Dict[str, Union[float, int, str, None]]:
        return {
            "OR": float(self.odds_ratio),
            "SampleSize": int(self.sample_size),
            "Repeat": int(self.repeat),
            "Result": self.result if self.ok else None,
            "Error": self.error,
        }


class SweepResults:
    """Container for all trial results of one sweep."""

    def __init__(self, results: Iterable[TrialResult]) -> None:
        self.results: List[TrialResult] = sorted(
            results, key=lambda res: (res.odds_ratio, res.sample_size, res.repeat)
        )

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    @property
    def n_failed(self) -> int:
        return sum(1 for res in self.results if not res.ok)

    def to_dataframe(self) -> pd.DataFrame:
        if not self.results:
            return pd.DataFrame(columns=RESULT_COLUMNS)
        df = pd.DataFrame([res.to_record() for res in self.results], columns=RESULT_COLUMNS)
        df["Result"] = df["Result"].astype("Int64")
        return df
