"""SHA-256 hashing for render provenance.

Provides:
    - sha256_bytes(): Hash an in-memory byte string
    - sha256_buffer(): Hash a pixel array's raw bytes
    - sha256_file(): Hash file contents in chunks

Used by:
    - render CLI: digest written into the output sidecar
    - Tests: determinism checks (same operations -> same digest)

Results are lowercase hex strings (64 chars).
"""

import hashlib
from pathlib import Path
from typing import Union

import numpy as np


def sha256_bytes(data: bytes) -> str:
    """SHA-256 hex digest of *data*."""
    return hashlib.sha256(data).hexdigest()


def sha256_buffer(buf: np.ndarray) -> str:
    """SHA-256 hex digest of an array's values in C order.

    Parameters
    ----------
    buf : np.ndarray
        Pixel buffer (any shape); non-contiguous views are copied first.

    Returns
    -------
    str
        Digest of ``np.ascontiguousarray(buf).tobytes()``.
    """
    return sha256_bytes(np.ascontiguousarray(buf).tobytes())


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """SHA-256 hex digest of a file, read *chunk_size* bytes at a time.

    Used to check a written ``.rgba`` buffer against its sidecar.

    Raises
    ------
    FileNotFoundError
        If *path* is missing.
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Cannot hash missing file: {source}")

    digest = hashlib.sha256()
    with source.open("rb") as fh:
        while True:
            block = fh.read(chunk_size)
            if not block:
                break
            digest.update(block)
    return digest.hexdigest()
