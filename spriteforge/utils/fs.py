"""Atomic filesystem helpers for render outputs and YAML documents.

Provides:
    - atomic_write_bytes() / atomic_write_text(): write to a sibling temp
      file, fsync, then os.replace() onto the target
    - atomic_yaml_dump() / load_yaml(): PyYAML safe_dump / safe_load
    - ensure_dir(): mkdir -p

A reader of the output directory sees either the previous file or the
complete new one, never a truncated buffer or sidecar.

Usage:
    from spriteforge.utils import fs
    fs.atomic_write_bytes(out_dir / "icon.rgba", canvas.to_bytes())
    fs.atomic_yaml_dump(metadata, out_dir / "icon.rgba.yaml")
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

import yaml

PathLike = Union[str, Path]


def ensure_dir(p: PathLike) -> Path:
    """Create *p* and any missing parents; return it as a Path."""
    directory = Path(p)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write_bytes(path: PathLike, data: bytes) -> None:
    """Replace *path* with *data* in one rename.

    Parameters
    ----------
    path : str | Path
        Destination file; parent directories are created.
    data : bytes
        Full file contents.

    Raises
    ------
    RuntimeError
        If writing or renaming fails. The temp file is removed first.

    Notes
    -----
    The temp file is created in the destination directory so os.replace()
    never crosses a filesystem boundary.
    """
    target = Path(path)
    directory = ensure_dir(target.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise RuntimeError(f"Failed to write {target} atomically: {exc}") from exc


def atomic_write_text(path: PathLike, text: str, encoding: str = "utf-8") -> None:
    """Text variant of :func:`atomic_write_bytes`."""
    atomic_write_bytes(path, text.encode(encoding))


def atomic_yaml_dump(obj: Any, path: PathLike) -> None:
    """Write *obj* as block-style YAML, keeping mapping order."""
    text = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_text(path, text)


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """Read a YAML mapping with ``yaml.safe_load``.

    Returns
    -------
    dict
        Parsed document; ``{}`` for an empty file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    yaml.YAMLError
        If the file is not valid YAML (message includes the path).
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"YAML file not found: {source}")

    try:
        data = yaml.safe_load(source.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise yaml.YAMLError(f"Could not parse {source}: {exc}") from exc
    return {} if data is None else data
