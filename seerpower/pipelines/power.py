"""
Power Sweep Pipeline Module

Drives the external association tool over a grid of odds ratios, sample sizes
and repeats, and collects one result row per trial. Population data is loaded
once and shared read-only by every trial.
"""

import collections
import concurrent.futures
import sys
import time
import warnings
import numpy as np
from pathlib import Path
from typing import Iterator, Optional, TextIO, Tuple, Union

from tqdm import tqdm

from ..config import SweepConfig
from ..data.loaders import load_population
from ..sampling.reservoir import InsufficientPopulationError
from ..utils.data_types import PopulationRoster, SweepResults, TrialParameters, TrialResult
from .trial import TrialRunner

GridCell = Tuple[int, int, TrialParameters]


class PowerSweepPipeline:
    """
    Pipeline estimating the power of an external association tool.

    Typical workflow:
        1. Initialize with a SweepConfig
        2. Load the population roster and structure matrix
        3. Run the sweep, streaming one TSV row per trial

    Attributes:
        config (SweepConfig): Sweep parameters
        roster (PopulationRoster): Source population
        structure (ndarray): Structure matrix aligned with the roster
        seed (int): Root seed actually used for the last run

    Example:
        >>> from seerpower.pipelines.power import PowerSweepPipeline
        >>> from seerpower.config import SweepConfig
        >>>
        >>> pipeline = PowerSweepPipeline(SweepConfig(repeats=10, seed=1))
        >>> pipeline.load_data('samples.txt', 'structure.mat')
        >>> results = pipeline.run(stream=sys.stdout)
    """

    def __init__(self, config: Optional[SweepConfig] = None, verbose: bool = True):
        self.config = (config or SweepConfig()).validate()
        self.verbose = verbose

        self.roster: Optional[PopulationRoster] = None
        self.structure: Optional[np.ndarray] = None
        self.runner: Optional[TrialRunner] = None
        self.seed: Optional[int] = self.config.seed

    def log(self, message: str):
        """Progress messages go to stderr; stdout carries the result stream"""
        if self.verbose:
            print(message, file=sys.stderr)

    def log_step(self, step_name: str, start_time: Optional[float] = None):
        """Log a pipeline step with optional timing"""
        if start_time is not None:
            elapsed = time.time() - start_time
            self.log(f"{step_name} completed in {elapsed:.2f} seconds")
        else:
            self.log(f"{step_name}...")

    def load_data(self,
                  roster_file: Union[str, Path],
                  structure_file: Union[str, Path],
                  structure_file_format: Optional[str] = None):
        """
        Load the population roster and the structure matrix.

        Raises:
            FileNotFoundError: If either file is missing
            ValueError: If either file cannot be parsed, or row counts differ
        """
        step_start = time.time()
        self.log_step("Loading population data")

        self.roster, self.structure = load_population(
            roster_file, structure_file, structure_format=structure_file_format
        )
        n_present = int(self.roster.element_present.sum())
        self.log(f"   Loaded {self.roster.n_samples} individuals ({n_present} carrying the element)")
        self.log(f"   Structure matrix: {self.structure.shape[0]} x {self.structure.shape[1]}")

        self.runner = TrialRunner(self.roster, self.structure, self.config)
        self.log_step("Data loading", step_start)

    def set_population(self, roster: PopulationRoster, structure: np.ndarray):
        """Use already-loaded population data"""
        self.roster = roster
        self.structure = np.asarray(structure, dtype=np.float64)
        self.runner = TrialRunner(self.roster, self.structure, self.config)

    def check_sample_sizes(self):
        """Fail before running if any sample size exceeds the population"""
        if self.roster is None:
            raise ValueError("Population not loaded. Call load_data() first.")
        largest = max(self.config.sample_sizes())
        if largest > self.roster.n_samples:
            raise InsufficientPopulationError(largest, self.roster.n_samples)

    def iter_grid(self) -> Iterator[GridCell]:
        """Cells in sweep order: odds ratio, then sample size, then repeat"""
        for or_index, odds_ratio in enumerate(self.config.odds_ratios()):
            for size_index, sample_size in enumerate(self.config.sample_sizes()):
                for repeat in range(1, self.config.repeats + 1):
                    yield or_index, size_index, TrialParameters(odds_ratio, sample_size, repeat)

    def trial_rng(self, or_index: int, size_index: int, repeat: int) -> np.random.Generator:
        """Independent generator for one cell, fixed by the root seed and the cell position"""
        seq = np.random.SeedSequence(self.seed, spawn_key=(or_index, size_index, repeat))
        return np.random.default_rng(seq)

    def _run_cell(self, cell: GridCell) -> TrialResult:
        or_index, size_index, params = cell
        return self.runner.run_safely(params, rng=self.trial_rng(or_index, size_index, params.repeat))

    def iter_results(self, n_jobs: Optional[int] = None) -> Iterator[TrialResult]:
        """
        Run every trial of the sweep, yielding results in grid order.

        With n_jobs > 1 trials run on a bounded thread pool; each worker
        blocks on one external process at a time.
        """
        if self.runner is None:
            raise ValueError("Population not loaded. Call load_data() first.")

        n_jobs = n_jobs or self.config.n_jobs
        if n_jobs <= 1:
            for cell in self.iter_grid():
                yield self._run_cell(cell)
            return

        max_pending = 2 * n_jobs
        with concurrent.futures.ThreadPoolExecutor(max_workers=n_jobs) as executor:
            pending = collections.deque()
            for cell in self.iter_grid():
                pending.append(executor.submit(self._run_cell, cell))
                if len(pending) >= max_pending:
                    yield pending.popleft().result()
            while pending:
                yield pending.popleft().result()

    def run(self,
            stream: Optional[TextIO] = None,
            n_jobs: Optional[int] = None,
            progress: bool = False) -> SweepResults:
        """
        Run the sweep.

        Args:
            stream: Where to write one ``OR<TAB>N<TAB>repeat<TAB>result`` line
                per trial as it completes (nothing is written if None)
            n_jobs: Concurrent trials (defaults to config.n_jobs)
            progress: Show a progress bar on stderr

        Returns:
            SweepResults with every trial, including failed ones
        """
        self.check_sample_sizes()

        if self.seed is None:
            self.seed = int(np.random.SeedSequence().entropy)
        self.log(f"Running {self.config.n_trials} trials "
                 f"({len(self.config.odds_ratios())} odds ratios x "
                 f"{len(self.config.sample_sizes())} sample sizes x {self.config.repeats} repeats), seed={self.seed}")

        step_start = time.time()
        collected = []
        with tqdm(total=self.config.n_trials, disable=not progress, file=sys.stderr, unit="trial") as bar:
            for trial in self.iter_results(n_jobs=n_jobs):
                if not trial.ok:
                    self.log(f"   Trial OR={trial.odds_ratio:g} N={trial.sample_size} "
                             f"repeat={trial.repeat} failed: {trial.error}")
                if stream is not None:
                    stream.write(trial.to_row() + "\n")
                    stream.flush()
                collected.append(trial)
                bar.update(1)

        results = SweepResults(collected)
        if results.n_failed:
            warnings.warn(f"{results.n_failed} of {len(results)} trials failed; their rows are marked ERROR")
        self.log_step("Power sweep", step_start)
        return results
