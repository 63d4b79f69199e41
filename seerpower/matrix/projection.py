"""
Restriction of the population structure matrix to a subsample
"""

import numpy as np
from pathlib import Path
from typing import Optional, Sequence, Union

from ..data.io_utils import STRUCTURE_SUFFIXES, new_staging_path, save_structure_matrix


def project_structure(matrix: np.ndarray, indices: Sequence[int]) -> np.ndarray:
    """Rows of ``matrix`` at ``indices``, in that order, values unchanged

    Args:
        matrix: Structure matrix (individuals x components)
        indices: Subsample indices into the matrix rows

    Returns:
        New matrix of shape (len(indices), matrix.shape[1])
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise ValueError(f"Structure matrix must be 2-D, got shape {matrix.shape}")

    rows = np.asarray(indices, dtype=np.int64)
    if rows.size and (rows.min() < 0 or rows.max() >= matrix.shape[0]):
        raise IndexError(f"Row index out of range for structure matrix with {matrix.shape[0]} rows")

    return matrix[rows, :].copy()


def stage_structure(matrix: np.ndarray,
                    indices: Sequence[int],
                    fmt: str = 'arma',
                    work_dir: Optional[Union[str, Path]] = None) -> Path:
    """Project the matrix to the subsample and save it to a new uniquely named file"""
    projected = project_structure(matrix, indices)
    path = new_staging_path(prefix="seerpower_struct_", suffix=STRUCTURE_SUFFIXES.get(fmt, ""), work_dir=work_dir)
    try:
        save_structure_matrix(projected, path, fmt=fmt)
    except Exception:
        path.unlink(missing_ok=True)
        raise
    return path
