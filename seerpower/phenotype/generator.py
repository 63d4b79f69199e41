"""
Binary phenotype assignment for a subsample of the roster
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Optional, Sequence, Union

from ..utils.data_types import PopulationRoster
from ..data.io_utils import new_staging_path


def generate_phenotype(roster: PopulationRoster,
                       indices: Sequence[int],
                       p_case_absent: float,
                       rng: Optional[np.random.Generator] = None) -> pd.DataFrame:
    """Assign case (1) / control (0) labels to the sampled individuals

    One uniform draw in [0, 1) is taken per sampled individual, in index
    order. Carriers become cases when the draw is below
    ``1 - p_case_absent``; non-carriers when it is below ``p_case_absent``.

    Args:
        roster: Source population
        indices: Subsample indices into the roster
        p_case_absent: Case probability for individuals without the element
        rng: Random generator (a fresh unseeded one if None)

    Returns:
        DataFrame with columns ['ID', 'Phenotype'] in index order
    """
    if rng is None:
        rng = np.random.default_rng()

    sampled = roster.subset(indices)
    p_case_present = 1.0 - p_case_absent

    draws = rng.random(len(sampled))
    present = sampled['Present'].to_numpy(dtype=bool)
    is_case = np.where(present, draws < p_case_present, draws < p_case_absent)

    return pd.DataFrame({
        'ID': sampled['ID'].to_numpy(),
        'Phenotype': is_case.astype(np.int8),
    })


def write_phenotype_file(assignment: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write ``name<TAB>label`` lines, one per individual, no header"""
    path = Path(path)
    assignment[['ID', 'Phenotype']].to_csv(path, sep='\t', header=False, index=False)
    return path


def stage_phenotype(roster: PopulationRoster,
                    indices: Sequence[int],
                    p_case_absent: float,
                    rng: Optional[np.random.Generator] = None,
                    work_dir: Optional[Union[str, Path]] = None) -> Path:
    """Generate a phenotype and write it to a new uniquely named file"""
    assignment = generate_phenotype(roster, indices, p_case_absent, rng=rng)
    path = new_staging_path(prefix="seerpower_pheno_", suffix=".pheno", work_dir=work_dir)
    try:
        write_phenotype_file(assignment, path)
    except Exception:
        path.unlink(missing_ok=True)
        raise
    return path
