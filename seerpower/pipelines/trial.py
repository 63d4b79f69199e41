"""
Single power trial: subsample, stage inputs, run the external tool
"""

import numpy as np
from typing import Optional

from ..association.external import ExternalAssociationTool, ExternalToolError
from ..config import SweepConfig
from ..data.io_utils import staged_files
from ..matrix.projection import stage_structure
from ..phenotype.generator import stage_phenotype
from ..phenotype.model import prob_case_given_absent
from ..sampling.reservoir import reservoir_sample
from ..utils.data_types import PopulationRoster, TrialParameters, TrialResult


class TrialRunner:
    """Runs one trial of the sweep against a fixed population.

    The roster and structure matrix are shared read-only between trials;
    everything a trial creates is removed before it returns.
    """

    def __init__(self,
                 roster: PopulationRoster,
                 structure: np.ndarray,
                 config: SweepConfig,
                 tool: Optional[ExternalAssociationTool] = None):
        if structure.shape[0] != roster.n_samples:
            raise ValueError(
                f"Structure matrix rows ({structure.shape[0]}) != roster individuals ({roster.n_samples})"
            )
        self.roster = roster
        self.structure = structure
        self.config = config
        self.tool = tool if tool is not None else ExternalAssociationTool.from_config(config)

    def __call__(self, sample_size: int, odds_ratio: float,
                 rng: Optional[np.random.Generator] = None) -> int:
        if rng is None:
            rng = np.random.default_rng()

        kept = reservoir_sample(sample_size, self.roster.n_samples, rng)
        p_absent = prob_case_given_absent(odds_ratio, self.config.maf, self.config.sampling_ratio)

        with staged_files() as staged:
            pheno_file = staged.add(stage_phenotype(
                self.roster, kept, p_absent, rng=rng, work_dir=self.config.work_dir,
            ))
            struct_file = staged.add(stage_structure(
                self.structure, kept, fmt=self.config.structure_format, work_dir=self.config.work_dir,
            ))
            return self.tool.run(pheno_file, struct_file)

    def run_safely(self, params: TrialParameters,
                   rng: Optional[np.random.Generator] = None) -> TrialResult:
        """Run a trial, recording failures in the result instead of raising"""
        result = TrialResult(params.odds_ratio, params.sample_size, params.repeat)
        try:
            result.result = self(params.sample_size, params.odds_ratio, rng=rng)
        except (ExternalToolError, OSError, ValueError) as e:
            result.error = f"{type(e).__name__}: {e}"
        return result
