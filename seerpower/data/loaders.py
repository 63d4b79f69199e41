"""
Data loading utilities for the population roster and structure matrix
"""

import pandas as pd
import numpy as np
from pathlib import Path
from typing import Union, Optional, Tuple
import warnings

import h5py

from .io_utils import ARMA_BINARY_HEADER, ARMA_TEXT_HEADER
from ..utils.data_types import PopulationRoster

STRUCTURE_DATASET = 'structure'


def detect_matrix_format(filepath: Union[str, Path]) -> str:
    """Detect structure matrix format based on extension and content

    Args:
        filepath: Path to file

    Returns:
        Detected format: 'arma', 'npy', 'npz', 'hdf5' or 'text'
    """
    filepath = Path(filepath)
    suffix = filepath.suffix.lower()

    if suffix == '.npy':
        return 'npy'
    elif suffix == '.npz':
        return 'npz'
    elif suffix in ['.h5', '.hdf5']:
        return 'hdf5'

    # No telling extension; sniff magic bytes
    with open(filepath, 'rb') as f:
        magic = f.read(8)
    if magic.startswith(b'ARMA_MAT'):
        return 'arma'
    if magic.startswith(b'\x93NUMPY'):
        return 'npy'
    if magic.startswith(b'PK'):
        return 'npz'
    if magic.startswith(b'\x89HDF'):
        return 'hdf5'
    return 'text'


def _load_arma_matrix(filepath: Path) -> np.ndarray:
    """Read a matrix saved by armadillo's Mat::save (text or binary, doubles only)"""
    with open(filepath, 'rb') as f:
        header = f.readline().decode('ascii', errors='replace').strip()
        shape = f.readline().split()
        if len(shape) != 2:
            raise ValueError(f"Malformed armadillo header in {filepath}")
        n_rows, n_cols = int(shape[0]), int(shape[1])

        if header == ARMA_BINARY_HEADER:
            values = np.frombuffer(f.read(), dtype='<f8')
            if values.size != n_rows * n_cols:
                raise ValueError(f"{filepath} holds {values.size} values, header says {n_rows}x{n_cols}")
            # armadillo stores column-major
            return values.reshape((n_rows, n_cols), order='F')
        if header == ARMA_TEXT_HEADER:
            values = np.array(f.read().decode("ascii").split(), dtype=np.float64)
            if values.size != n_rows * n_cols:
                raise ValueError(f"{filepath} holds {values.size} values, header says {n_rows}x{n_cols}")
            return values.reshape((n_rows, n_cols))

    raise ValueError(f"Unsupported armadillo matrix type '{header}' in {filepath}; expected doubles")


def _detect_numeric_separator(filepath: Union[str, Path]) -> Optional[str]:
    """Heuristically determine the delimiter for numeric text matrices (None = whitespace)."""
    filepath = Path(filepath)
    with filepath.open('r') as handle:
        for _ in range(10):
            line = handle.readline()
            if not line:
                break
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            comma_count = line.count(',')
            tab_count = line.count('\t')
            if tab_count or comma_count:
                return '\t' if tab_count >= comma_count else ','
            return None
    return None


def load_roster_file(filepath: Union[str, Path]) -> PopulationRoster:
    """Load the population roster

    Expected format: whitespace-separated ``<name> <0|1>``, one individual per
    line, no header. Blank lines are skipped.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a line does not have exactly two fields, a flag is not
            0/1, or the roster is empty
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Roster file not found: {filepath}")

    records = []
    with open(filepath, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 2:
                raise ValueError(
                    f"Roster file '{filepath}' line {line_number}: expected 2 fields, got {len(fields)}"
                )
            if fields[1] not in ('0', '1'):
                raise ValueError(
                    f"Roster file '{filepath}' line {line_number}: element presence must be 0 or 1, got '{fields[1]}'"
                )
            records.append((fields[0], int(fields[1])))

    if not records:
        raise ValueError(f"Roster file '{filepath}' contains no individuals")

    roster = PopulationRoster(pd.DataFrame(records, columns=['ID', 'Present']))

    duplicated = roster.names[roster.names.duplicated()].unique()
    if len(duplicated) > 0:
        warnings.warn(
            f"Roster contains duplicated names (e.g. {', '.join(duplicated[:5])}); "
            "phenotype files will repeat them"
        )

    return roster


def _load_hdf5_matrix(filepath: Path) -> np.ndarray:
    with h5py.File(filepath, 'r') as f:
        if STRUCTURE_DATASET in f:
            return f[STRUCTURE_DATASET][()]
        for key in f.keys():
            if isinstance(f[key], h5py.Dataset):
                return f[key][()]
    raise ValueError(f"No dataset found in HDF5 file: {filepath}")


def _load_npz_matrix(filepath: Path) -> np.ndarray:
    with np.load(filepath) as archive:
        if STRUCTURE_DATASET in archive.files:
            return archive[STRUCTURE_DATASET]
        if len(archive.files) == 1:
            return archive[archive.files[0]]
        raise ValueError(
            f"NPZ file '{filepath}' holds {len(archive.files)} arrays; "
            f"name the structure matrix '{STRUCTURE_DATASET}'"
        )


def load_structure_matrix(filepath: Union[str, Path],
                          file_format: Optional[str] = None) -> np.ndarray:
    """Load a population structure matrix (one row per individual)

    Args:
        filepath: Path to matrix file
        file_format: 'arma', 'npy', 'npz', 'hdf5' or 'text'; auto-detected if None

    Returns:
        2-D float64 matrix; 1-D data is returned as a single column
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Structure matrix file not found: {filepath}")

    if file_format is None:
        file_format = detect_matrix_format(filepath)

    try:
        if file_format == 'arma':
            matrix = _load_arma_matrix(filepath)
        elif file_format == 'npy':
            matrix = np.load(filepath, allow_pickle=False)
        elif file_format == 'npz':
            matrix = _load_npz_matrix(filepath)
        elif file_format == 'hdf5':
            matrix = _load_hdf5_matrix(filepath)
        elif file_format == 'text':
            matrix = np.loadtxt(filepath, delimiter=_detect_numeric_separator(filepath), ndmin=2)
        else:
            raise ValueError(f"Unknown structure matrix format: {file_format}")
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not load structure matrix {filepath}: {e}") from e

    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim == 1:
        matrix = matrix[:, np.newaxis]
    if matrix.ndim != 2:
        raise ValueError(f"Structure matrix must be 2-D, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        warnings.warn(f"Structure matrix {filepath} contains non-finite values")

    return matrix


def load_population(roster_file: Union[str, Path],
                    structure_file: Union[str, Path],
                    structure_format: Optional[str] = None) -> Tuple[PopulationRoster, np.ndarray]:
    """Load roster and structure matrix and check they describe the same individuals"""
    roster = load_roster_file(roster_file)
    structure = load_structure_matrix(structure_file, file_format=structure_format)

    if structure.shape[0] != roster.n_samples:
        raise ValueError(
            f"Structure matrix rows ({structure.shape[0]}) != roster individuals ({roster.n_samples})"
        )

    return roster, structure
