"""Logging setup for the render entrypoints.

Library modules only ever call ``logging.getLogger(__name__)``. Handlers are
attached once, by whichever entrypoint runs (scripts/render_sprite.py), via
setup_logging(). Calling it again swaps the handlers rather than stacking
them.

Features:
    - stderr console handler, optionally coloured
    - optional log file: plain, size-rotated or time-rotated
    - human-readable lines or one JSON object per line
    - contextual fields (app, sprite, ...) appended to every record
    - Python warnings routed into the 'py.warnings' logger

Line formats:
    human  2026-03-02T09:14:07.512Z | INFO     | app=render sprite=icon | Finalized canvas
    json   {"t": "2026-03-02T09:14:07.512000+00:00", "lvl": "INFO", "sprite": "icon", "msg": "..."}
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_LOG_CONTEXT: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'spriteforge_log_context', default={}
)

_configured = False

_ANSI = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_ANSI_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Render records with the active push_context() fields.

    Parameters
    ----------
    fmt_mode : str
        "human" or "json".
    use_color : bool
        Wrap the level name in ANSI colour codes; ignored unless stderr is a
        terminal.
    tz : str
        "UTC" or "local".
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.tz = tz
        self.use_color = bool(use_color) and sys.stderr.isatty()

    def _timestamp(self, record: logging.LogRecord) -> datetime:
        tzinfo = timezone.utc if self.tz == "UTC" else None
        return datetime.fromtimestamp(record.created, tz=tzinfo)

    def format(self, record: logging.LogRecord) -> str:
        stamp = self._timestamp(record)
        fields = _LOG_CONTEXT.get()
        if self.fmt_mode == "json":
            return self._as_json(record, stamp, fields)
        return self._as_text(record, stamp, fields)

    def _as_json(self, record: logging.LogRecord, stamp: datetime, fields: Dict[str, Any]) -> str:
        payload: Dict[str, Any] = {
            't': stamp.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            **fields,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            payload['exc'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)

    def _as_text(self, record: logging.LogRecord, stamp: datetime, fields: Dict[str, Any]) -> str:
        level = record.levelname.ljust(8)
        if self.use_color:
            level = _ANSI.get(record.levelname, '') + level + _ANSI_RESET

        segments = [f"{stamp:%Y-%m-%dT%H:%M:%S}.{stamp.microsecond // 1000:03d}Z", level]
        if fields:
            segments.append(' '.join(f"{key}={value}" for key, value in fields.items()))
        segments.append(record.getMessage())
        text = ' | '.join(segments)

        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def _file_handler(
    log_file: str,
    rotate: Optional[Dict[str, Any]],
    json_lines: bool,
    tz: str,
) -> logging.Handler:
    """Plain, size-rotated or time-rotated file handler for *log_file*."""
    target = Path(log_file)
    target.parent.mkdir(parents=True, exist_ok=True)

    mode = (rotate or {}).get('mode')
    if not rotate:
        handler: logging.Handler = logging.FileHandler(target, encoding='utf-8')
    elif mode in (None, 'size'):
        handler = logging.handlers.RotatingFileHandler(
            target,
            maxBytes=rotate.get('max_bytes', 10_000_000),
            backupCount=rotate.get('backup_count', 3),
            encoding='utf-8',
        )
    elif mode == 'time':
        handler = logging.handlers.TimedRotatingFileHandler(
            target,
            when=rotate.get('when', 'D'),
            interval=rotate.get('interval', 1),
            backupCount=rotate.get('backup_count', 7),
            encoding='utf-8',
        )
    else:
        raise ValueError(f"Unknown rotation mode {mode!r}; expected 'size' or 'time'")

    handler.setFormatter(ContextFormatter("json" if json_lines else "human", use_color=False, tz=tz))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    rotate: Optional[Dict[str, Any]] = None,
    tz: str = "UTC",
    capture_warnings: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Install handlers on the root logger.

    Parameters
    ----------
    log_level : str
        Root level name, e.g. "INFO".
    log_file : str, optional
        Also log to this file (parent directories are created).
    json : bool
        JSON lines in the log file instead of human lines.
    color : bool
        Colour level names on the console.
    to_stderr : bool
        Attach the console handler.
    rotate : dict, optional
        ``{"mode": "size", "max_bytes": ..., "backup_count": ...}`` or
        ``{"mode": "time", "when": "D", "interval": 1, "backup_count": ...}``.
    tz : str
        Timestamp zone, "UTC" or "local".
    capture_warnings : bool
        Send ``warnings.warn`` output through logging.
    context : dict, optional
        Fields pushed before returning, e.g. ``{"app": "render"}``.

    Returns
    -------
    dict
        ``{"handlers": [...]}``, the handlers this call attached.

    Raises
    ------
    ValueError
        For an unknown level name or rotation mode.
    """
    global _configured

    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    if _configured:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()

    fresh: List[logging.Handler] = []
    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", color, tz))
        fresh.append(console)
    if log_file:
        fresh.append(_file_handler(log_file, rotate, json, tz))

    root.setLevel(level)
    for handler in fresh:
        root.addHandler(handler)

    if context:
        push_context(**context)
    if capture_warnings:
        route_warnings()

    _configured = True
    return {'handlers': fresh}


def get_logger(name: str) -> logging.Logger:
    """Same as ``logging.getLogger(name)``; for callers importing from here."""
    return logging.getLogger(name)


def push_context(**fields: Any) -> None:
    """Attach *fields* to every record formatted from now on.

    Examples
    --------
    >>> push_context(app="render", sprite="icon")
    >>> logger.info("Finalized")  # "... | app=render sprite=icon | Finalized"
    """
    merged = dict(_LOG_CONTEXT.get())
    merged.update(fields)
    _LOG_CONTEXT.set(merged)


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the named fields (missing names are ignored); None drops all."""
    if keys is None:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set({k: v for k, v in _LOG_CONTEXT.get().items() if k not in keys})


def current_context() -> Dict[str, Any]:
    return dict(_LOG_CONTEXT.get())


def route_warnings() -> None:
    """Route Python warnings to the 'py.warnings' logger at WARNING."""
    logging.captureWarnings(True)
    logging.getLogger('py.warnings').setLevel(logging.WARNING)
