"""
Sweep configuration

Defaults reproduce the reference seer power study: odds ratios 0.5..5.5 in steps of
1, sample sizes 50..3000 in steps of 50, 100 repeats per cell, an element in
25% of the population and equal numbers of cases and controls.
"""

from __future__ import annotations

import json
import math
import numbers
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .data.io_utils import STRUCTURE_FORMATS

# Tolerance when counting inclusive grid points built from float steps
GRID_EPS = 1e-9


def inclusive_range(start: float, end: float, step: float) -> List[float]:
    """Values ``start, start + step, ...`` up to and including ``end``

    Built from an integer count so accumulated float error never drops or
    adds the end point.
    """
    if step <= 0:
        raise ValueError(f"Step must be positive, got {step}")
    if end < start:
        return []
    count = int(math.floor((end - start) / step + GRID_EPS)) + 1
    return [start + i * step for i in range(count)]


@dataclass
class SweepConfig:
    """Parameters of one power sweep."""

    or_start: float = 0.5
    or_step: float = 1.0
    or_end: float = 5.5

    samples_start: int = 50
    samples_step: int = 50
    samples_end: int = 3000

    repeats: int = 100

    maf: float = 0.25  # fraction of the population carrying the element
    sampling_ratio: float = 1.0  # cases : controls

    feature_file: str = "gene_kmers.txt.gz"
    tool: str = "./seer"
    extra_args: List[str] = field(default_factory=list)
    timeout: Optional[float] = None

    n_jobs: int = 1
    seed: Optional[int] = None
    work_dir: Optional[str] = None
    structure_format: str = 'arma'  # armadillo text, read by seer

    # Minimum tool result counted as a detection in power summaries
    min_hits: int = 1

    def odds_ratios(self) -> List[float]:
        return [round(value, 10) for value in inclusive_range(self.or_start, self.or_end, self.or_step)]

    def sample_sizes(self) -> List[int]:
        return [int(value) for value in inclusive_range(self.samples_start, self.samples_end, self.samples_step)]

    @property
    def n_trials(self) -> int:
        return len(self.odds_ratios()) * len(self.sample_sizes()) * self.repeats

    def validate(self) -> "SweepConfig":
        """Raise ValueError describing the first invalid setting."""
        if self.or_step <= 0:
            raise ValueError(f"OR step must be positive, got {self.or_step}")
        if self.or_start <= 0:
            raise ValueError(f"Odds ratios must be positive, got start {self.or_start}")
        if self.or_end < self.or_start:
            raise ValueError(f"OR end ({self.or_end}) is below OR start ({self.or_start})")
        if self.samples_step <= 0:
            raise ValueError(f"Sample size step must be positive, got {self.samples_step}")
        if self.samples_start < 1:
            raise ValueError(f"Sample sizes must be at least 1, got start {self.samples_start}")
        if self.samples_end < self.samples_start:
            raise ValueError(f"Sample size end ({self.samples_end}) is below start ({self.samples_start})")
        if self.repeats < 1:
            raise ValueError(f"Repeats must be at least 1, got {self.repeats}")
        if not (0.0 < self.maf < 1.0):
            raise ValueError(f"MAF must be in (0, 1), got {self.maf}")
        if self.sampling_ratio <= 0:
            raise ValueError(f"Sampling ratio must be positive, got {self.sampling_ratio}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
        if self.n_jobs < 1:
            raise ValueError(f"n_jobs must be at least 1, got {self.n_jobs}")
        if self.seed is not None and (not isinstance(self.seed, numbers.Integral) or self.seed < 0):
            raise ValueError(f"Seed must be a non-negative integer, got {self.seed!r}")
        if not isinstance(self.extra_args, (list, tuple)) or not all(isinstance(a, str) for a in self.extra_args):
            raise ValueError(f"extra_args must be a list of strings, got {self.extra_args!r}")
        if self.structure_format not in STRUCTURE_FORMATS:
            raise ValueError(
                f"Unknown structure format '{self.structure_format}'; expected one of {STRUCTURE_FORMATS}"
            )
        if self.work_dir is not None and not Path(self.work_dir).is_dir():
            raise ValueError(f"Work directory does not exist: {self.work_dir}")
        return self

    def updated(self, **overrides: Any) -> "SweepConfig":
        """Copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SweepConfig":
        return cls().updated(**values)

    @classmethod
    def from_json(cls, file_path: Union[str, Path]) -> "SweepConfig":
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")
        with open(file_path) as f:
            values = json.load(f)
        if not isinstance(values, dict):
            raise ValueError(f"Config file {file_path} must hold a JSON object")
        return cls.from_dict(values)
