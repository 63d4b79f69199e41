"""
File I/O utilities for seerpower: staged trial files and result tables
"""

import contextlib
import tempfile
import warnings
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Iterator, List, Optional, Union

import h5py

STRUCTURE_FORMATS = ('arma', 'txt', 'npy', 'hdf5')
STRUCTURE_SUFFIXES = {'arma': '.mat', 'txt': '.txt', 'npy': '.npy', 'hdf5': '.h5'}

# armadillo's own text format for double matrices: header, "rows cols", then rows
ARMA_TEXT_HEADER = "ARMA_MAT_TXT_FN008"
ARMA_BINARY_HEADER = "ARMA_MAT_BIN_FN008"


def new_staging_path(prefix: str,
                     suffix: str = "",
                     work_dir: Optional[Union[str, Path]] = None) -> Path:
    """Create an empty, uniquely named file and return its path

    The file is left on disk; the caller owns its removal.
    """
    with tempfile.NamedTemporaryFile(prefix=prefix, suffix=suffix, dir=work_dir, delete=False) as tmp:
        return Path(tmp.name)


def remove_staged_file(path: Optional[Union[str, Path]]) -> bool:
    """Best-effort removal of a staged file; warns instead of raising"""
    if path is None:
        return True
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        warnings.warn(f"Could not remove staged file {path}: {e}")
        return False
    return True


class StagedFiles:
    """Paths staged for one trial, removed when the trial ends"""

    def __init__(self) -> None:
        self.paths: List[Path] = []

    def add(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.paths.append(path)
        return path

    def cleanup(self) -> None:
        for path in self.paths:
            remove_staged_file(path)
        self.paths = []


@contextlib.contextmanager
def staged_files() -> Iterator[StagedFiles]:
    """Context manager guaranteeing staged files are removed on every exit path"""
    staged = StagedFiles()
    try:
        yield staged
    finally:
        staged.cleanup()


def save_structure_matrix(matrix: np.ndarray,
                          path: Union[str, Path],
                          fmt: str = 'arma') -> Path:
    """Persist a structure matrix

    Args:
        matrix: 2-D numeric matrix
        path: Output path (written as given, no suffix is appended)
        fmt: 'arma' (armadillo text with header, what seer's Mat::load
            expects), 'txt' (raw whitespace-separated ASCII), 'npy' (numpy
            native binary) or 'hdf5' (dataset 'structure')

    Returns:
        Path written
    """
    path = Path(path)
    if fmt == 'arma':
        matrix = np.asarray(matrix, dtype=np.float64)
        n_rows, n_cols = matrix.shape
        with open(path, 'w') as handle:
            handle.write(f"{ARMA_TEXT_HEADER}\n{n_rows} {n_cols}\n")
            np.savetxt(handle, matrix, delimiter=' ', fmt='%.17g')
    elif fmt == 'npy':
        with open(path, 'wb') as handle:
            np.save(handle, matrix)
    elif fmt == 'txt':
        np.savetxt(path, matrix, delimiter=' ', fmt='%.10g')
    elif fmt == 'hdf5':
        with h5py.File(path, 'w') as f:
            f.create_dataset('structure', data=matrix)
    else:
        raise ValueError(f"Unknown structure format '{fmt}'; expected one of {STRUCTURE_FORMATS}")
    return path


def save_sweep_results(results_df: pd.DataFrame, file_path: Union[str, Path]) -> Path:
    """Save a sweep results table as tab-separated text with header"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    results_df.to_csv(file_path, sep='\t', index=False)
    return file_path


def load_sweep_results(file_path: Union[str, Path]) -> pd.DataFrame:
    """Load a results table written by save_sweep_results or the stdout stream

    Headerless four-column tables (the stdout stream) are accepted too;
    ``ERROR`` entries become missing values.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Results file not found: {file_path}")

    with open(file_path, 'r') as f:
        first_line = f.readline()

    if first_line.startswith('OR\t'):
        df = pd.read_csv(file_path, sep='\t', na_values=['ERROR'])
    else:
        df = pd.read_csv(file_path, sep='\t', header=None,
                         names=['OR', 'SampleSize', 'Repeat', 'Result'],
                         na_values=['ERROR'])
        df['Error'] = np.where(df['Result'].isna(), 'ERROR', None)

    df['Result'] = df['Result'].astype('Int64')
    return df
