"""
Report Writer

Writes the association table, its checksum file, the chromosome annotation
file, the pathway summary and the JSON run summary.

Checksum file format (one line, ``sha256sum`` compatible)::

    <hexdigest>  <table file name>
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import pandas as pd

from .association_stats import TABLE_COLUMNS, pathway_summary
from ..models.data_models import RunSummary

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CHROMOSOME_COLUMNS = ['name', 'chromosome', 'start', 'stop', 'term_id']

_CHUNK_SIZE = 1 << 16

# Fixed-length digests available on every platform; sha256 is looked for first
CHECKSUM_ALGORITHMS = ['sha256'] + sorted(
    a for a in hashlib.algorithms_guaranteed if a != 'sha256' and not a.startswith('shake_')
)


def write_association_table(df: pd.DataFrame, path: PathLike) -> Path:
    """Write the table tab-delimited in the fixed column order; blanks stay empty."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.reindex(columns=TABLE_COLUMNS).to_csv(path, sep='\t', index=False, na_rep='')
    logger.info(f"Wrote {len(df)} associations to {path}")
    return path


def read_association_table(path: PathLike) -> pd.DataFrame:
    """Read a table written by :func:`write_association_table` (all columns as strings)."""
    return pd.read_csv(path, sep='\t', dtype=str, keep_default_na=False)


def compute_checksum(path: PathLike, algorithm: str = "sha256") -> str:
    """Hex digest of the file content."""
    digest = hashlib.new(algorithm)
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def checksum_path_for(path: PathLike, algorithm: str = "sha256") -> Path:
    path = Path(path)
    return path.with_name(f"{path.name}.{algorithm}")


def write_checksum(path: PathLike, algorithm: str = "sha256") -> Tuple[str, Path]:
    """
    Write ``<path>.<algorithm>`` next to the table.

    Returns:
        (hex digest, checksum file path)
    """
    path = Path(path)
    checksum = compute_checksum(path, algorithm)
    checksum_path = checksum_path_for(path, algorithm)
    checksum_path.write_text(f"{checksum}  {path.name}\n")
    logger.info(f"Wrote {algorithm} checksum {checksum[:12]}... to {checksum_path}")
    return checksum, checksum_path


def read_checksum(checksum_path: PathLike) -> str:
    """Digest stored in a checksum file."""
    content = Path(checksum_path).read_text().strip()
    if not content:
        raise ValueError(f"Empty checksum file: {checksum_path}")
    return content.split()[0]


def find_checksum_file(path: PathLike) -> Optional[Path]:
    """First existing ``<path>.<algorithm>`` file, sha256 first."""
    for algorithm in CHECKSUM_ALGORITHMS:
        candidate = checksum_path_for(path, algorithm)
        if candidate.exists():
            return candidate
    return None


def verify_checksum(path: PathLike, checksum_path: Optional[PathLike] = None,
                    algorithm: Optional[str] = None) -> bool:
    """
    Recompute the table's checksum and compare it with the stored one.

    When ``checksum_path`` is omitted, ``<path>.<algorithm>`` is used, or the
    first existing checksum file for any supported algorithm when
    ``algorithm`` is omitted too. The algorithm is otherwise taken from the
    checksum file's suffix, falling back to sha256.

    Raises:
        FileNotFoundError: If no checksum file exists for the table
    """
    if checksum_path is None:
        if algorithm is not None:
            checksum_path = checksum_path_for(path, algorithm)
        else:
            checksum_path = find_checksum_file(path)
            if checksum_path is None:
                raise FileNotFoundError(f"No checksum file found next to {path}")
    checksum_path = Path(checksum_path)
    if algorithm is None:
        suffix = checksum_path.suffix.lstrip('.')
        algorithm = suffix if suffix in CHECKSUM_ALGORITHMS else "sha256"

    expected = read_checksum(checksum_path)
    actual = compute_checksum(path, algorithm)
    if actual != expected:
        logger.warning(f"Checksum mismatch for {path}: expected {expected}, got {actual}")
        return False
    return True


def chromosome_annotation(df: pd.DataFrame) -> pd.DataFrame:
    """
    (gene name, chromosome, start, stop, term id) rows with a known location.

    Rows missing the name, chromosome or either coordinate are left out.
    """
    frame = df.reindex(columns=CHROMOSOME_COLUMNS)
    present = frame.notna() & (frame.astype(str) != '')
    frame = frame[present.all(axis=1)]
    return frame.drop_duplicates().reset_index(drop=True)


def write_chromosome_annotation(df: pd.DataFrame, path: PathLike) -> Path:
    """Write the tab-separated chromosome annotation file (no header)."""
    path = Path(path)
    frame = chromosome_annotation(df)
    frame.to_csv(path, sep='\t', index=False, header=False)
    skipped = len(df) - len(frame)
    logger.info(f"Wrote {len(frame)} located genes to {path}" + (f" ({skipped} rows left out)" if skipped else ""))
    return path


def read_chromosome_annotation(path: PathLike) -> pd.DataFrame:
    if not Path(path).read_text().strip():
        return pd.DataFrame(columns=CHROMOSOME_COLUMNS)
    frame = pd.read_csv(path, sep='\t', header=None, names=CHROMOSOME_COLUMNS,
                        dtype={'name': str, 'chromosome': str, 'term_id': str}, keep_default_na=False)
    return frame


def write_pathway_summary(df: pd.DataFrame, path: PathLike) -> Path:
    path = Path(path)
    pathway_summary(df).to_csv(path, sep='\t', index=False)
    logger.info(f"Wrote pathway summary to {path}")
    return path


def write_run_summary(summary: RunSummary, path: PathLike) -> Path:
    """Write the run summary as indented JSON."""
    path = Path(path)
    path.write_text(summary.model_dump_json(indent=2))
    logger.info(f"Wrote run summary to {path}")
    return path
