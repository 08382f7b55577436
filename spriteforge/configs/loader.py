"""Configuration loader for sprite rendering.

Loads and validates ``render.yaml`` into typed, frozen dataclasses. The
render entrypoints read logging, output and symmetry settings from here;
library code never reads configuration files itself.

Usage::

    from spriteforge.configs.loader import load_config
    cfg = load_config()                      # default path
    cfg = load_config("/custom/render.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from spriteforge.raster.symmetry import MIRROR_ALGORITHMS
from spriteforge.utils.fs import load_yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    """Arguments for :func:`spriteforge.utils.logging_config.setup_logging`."""

    level: str
    file: str | None = None
    json: bool = False
    color: bool = True


@dataclass(frozen=True)
class OutputConfig:
    """Where rendered buffers go and whether a metadata sidecar is written."""

    directory: str
    write_metadata: bool = True


@dataclass(frozen=True)
class SymmetryConfig:
    """Mirror algorithm for the symmetric box path."""

    algorithm: str = "closed_form"


@dataclass(frozen=True)
class RenderConfig:
    """Top-level render configuration."""

    logging: LoggingConfig
    output: OutputConfig
    symmetry: SymmetryConfig


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    file = data.get("file")
    return LoggingConfig(
        level=str(data["level"]).upper(),
        file=str(file) if file is not None else None,
        json=bool(data.get("json", False)),
        color=bool(data.get("color", True)),
    )


def _parse_output(data: dict[str, Any]) -> OutputConfig:
    return OutputConfig(
        directory=str(data["directory"]),
        write_metadata=bool(data.get("write_metadata", True)),
    )


def _parse_symmetry(data: dict[str, Any] | None) -> SymmetryConfig:
    if data is None:
        return SymmetryConfig()
    return SymmetryConfig(algorithm=str(data.get("algorithm", "closed_form")))


def _validate_config(cfg: RenderConfig) -> None:
    """Validate value ranges.

    Raises
    ------
    ConfigError
        On any invalid value.
    """
    if cfg.logging.level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {_LOG_LEVELS}, got {cfg.logging.level!r}"
        )
    if not cfg.output.directory:
        raise ConfigError("output.directory must be a non-empty path")
    if cfg.symmetry.algorithm not in MIRROR_ALGORITHMS:
        raise ConfigError(
            f"symmetry.algorithm must be one of {MIRROR_ALGORITHMS}, "
            f"got {cfg.symmetry.algorithm!r}"
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> RenderConfig:
    """Load and validate render configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``render.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    RenderConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If the file is not valid YAML, or any field is missing or fails
        validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "render.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file is not valid YAML: {path}: {exc}") from exc
    if not data:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        config = RenderConfig(
            logging=_parse_logging(data["logging"]),
            output=_parse_output(data["output"]),
            symmetry=_parse_symmetry(data.get("symmetry")),
        )
    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_config(config)
    return config
