"""
CLI helper utilities.

This module provides shared utilities for CLI commands including:
- Configuration loading
- Logging setup
- Console formatting
"""

import json
import logging
import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from ..constants import LoggingConfig

# Type alias for log levels
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_SECTIONS = ("logging", "conversion")
CONVERSION_BOOL_KEYS = ("stream", "force_memory")

# Attributes every LogRecord carries; anything else came in through extra=
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


# ============================================================================
# Formatters
# ============================================================================

class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        body: Dict[str, Any] = {
            "timestamp": created.strftime(LoggingConfig.JSON_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            body["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_") and key not in body
        }
        body.update(extras)
        return json.dumps(body, ensure_ascii=False, default=str)


# ============================================================================
# Logging Setup
# ============================================================================

@dataclass(frozen=True)
class LoggingSettings:
    """Resolved logging options: CLI overrides applied on top of the config section."""

    level: int
    log_file: Optional[str]
    style: str
    rotate: bool
    max_bytes: int
    backup_count: int
    console: bool

    @classmethod
    def resolve(
        cls,
        level: Optional[str],
        log_file: Optional[str],
        config: Dict[str, Any],
        console: bool,
    ) -> "LoggingSettings":
        level_name = str(level or config.get('level') or LoggingConfig.DEFAULT_LOG_LEVEL).upper()
        style = str(config.get('format', LoggingConfig.DEFAULT_FORMAT_STYLE)).lower()
        if style not in LoggingConfig.SUPPORTED_FORMATS:
            style = LoggingConfig.DEFAULT_FORMAT_STYLE

        path = log_file if log_file is not None else (config.get('file') or None)
        rotation = config.get('rotation')
        if not isinstance(rotation, dict):
            rotation = {}
        rotate = rotation.get('enabled', LoggingConfig.ROTATION_ENABLED)

        return cls(
            level=getattr(logging, level_name, logging.WARNING),
            log_file=path,
            style=style,
            rotate=bool(rotate),
            max_bytes=_positive_int(rotation.get('max_mb'), LoggingConfig.MAX_LOG_FILE_MB) * 1024 * 1024,
            backup_count=_positive_int(rotation.get('backup_count'), LoggingConfig.LOG_BACKUP_COUNT),
            console=console,
        )


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _build_formatter(settings: LoggingSettings) -> logging.Formatter:
    if settings.style == 'json':
        return JSONFormatter()
    return logging.Formatter(fmt=LoggingConfig.LOG_FORMAT, datefmt=LoggingConfig.DATE_FORMAT)


def _log_file_candidates(requested: str) -> List[str]:
    """Requested path first, then the same file name in the temp and home directories."""
    name = os.path.basename(requested) or "rdf2rdf.log"
    return [
        requested,
        os.path.join(tempfile.gettempdir(), name),
        os.path.join(Path.home(), name),
    ]


def _open_file_handler(log_file: str, settings: LoggingSettings) -> Optional[logging.Handler]:
    """Open the first writable location for ``log_file``, or return None."""
    for candidate in _log_file_candidates(log_file):
        try:
            parent = os.path.dirname(candidate)
            if parent:
                os.makedirs(parent, exist_ok=True)
            if settings.rotate:
                handler: logging.Handler = RotatingFileHandler(
                    candidate,
                    maxBytes=settings.max_bytes,
                    backupCount=settings.backup_count,
                    encoding='utf-8',
                )
            else:
                handler = logging.FileHandler(candidate, encoding='utf-8')
        except OSError as exc:
            print(f"  Could not create log at {candidate}: {exc.strerror or exc}", file=sys.stderr)
            continue
        if candidate != log_file:
            print(f"Note: Using fallback log file: {candidate}", file=sys.stderr)
        return handler

    print(f"Warning: Could not write log file {log_file}; logging to console only", file=sys.stderr)
    return None


_installed_handlers: List[logging.Handler] = []
_active_settings: Optional[LoggingSettings] = None
_active_log_file: Optional[str] = None


def _clear_managed_handlers() -> None:
    """Detach and close handlers previously installed by setup_logging."""
    global _installed_handlers, _active_settings, _active_log_file
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers = []
    _active_settings = None
    _active_log_file = None


def setup_logging(
    level: Optional[LogLevel] = None,
    log_file: Optional[str] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
    include_console: bool = True,
) -> Optional[str]:
    """
    Configure the root logger for a CLI run.

    Console output goes to stderr. When a log file is requested but cannot
    be created, the same file name is tried in the system temp directory
    and then the user's home directory before falling back to console-only
    logging. Calling this again with identical settings is a no-op.

    Args:
        level: Log level override; takes precedence over ``config``.
        log_file: Log file override; takes precedence over ``config``.
        config: Optional ``logging`` configuration section.
        include_console: If False, skip adding a console handler.

    Returns:
        The log file path actually used, or None when logging to console only.
    """
    global _installed_handlers, _active_settings, _active_log_file

    settings = LoggingSettings.resolve(level, log_file, dict(config or {}), include_console)
    if settings == _active_settings and _installed_handlers:
        return _active_log_file

    formatter = _build_formatter(settings)
    handlers: List[logging.Handler] = []
    used_file: Optional[str] = None

    if settings.log_file:
        file_handler = _open_file_handler(settings.log_file, settings)
        if file_handler is not None:
            handlers.append(file_handler)
            used_file = getattr(file_handler, 'baseFilename', settings.log_file)

    if settings.console or not handlers:
        handlers.insert(0, logging.StreamHandler(sys.stderr))

    _clear_managed_handlers()
    root = logging.getLogger()
    root.setLevel(settings.level)
    logging.captureWarnings(True)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    _installed_handlers = handlers
    _active_settings = settings
    _active_log_file = used_file

    if used_file:
        logging.getLogger(__name__).info(f"Logging to: {used_file}")
    return used_file


# ============================================================================
# Configuration
# ============================================================================

def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load and check a JSON configuration file.

    Recognised sections are ``logging`` and ``conversion``; unknown
    top-level keys are ignored.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Dictionary containing the configuration.

    Raises:
        ValueError: If config_path is empty or the file contents are invalid.
        FileNotFoundError: If the configuration file doesn't exist.
        PermissionError: If the file cannot be read.
    """
    if not config_path:
        raise ValueError("config_path cannot be empty")

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    if not path.is_file():
        raise ValueError(f"Configuration path is not a file: {config_path}")

    try:
        config = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path} (line {e.lineno}, column {e.colno}): {e.msg}") from e
    except UnicodeDecodeError as e:
        raise ValueError(f"Configuration file {config_path} is not UTF-8: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must contain a JSON object, got {type(config).__name__}")

    for section in CONFIG_SECTIONS:
        if not isinstance(config.get(section, {}), dict):
            raise ValueError(f"Configuration section '{section}' must be a JSON object")

    conversion = config.get('conversion', {})
    for key in CONVERSION_BOOL_KEYS:
        if key in conversion and not isinstance(conversion[key], bool):
            raise ValueError(f"Configuration value 'conversion.{key}' must be true or false")

    return config


# ============================================================================
# Console Output
# ============================================================================

def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with the given title."""
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_footer(width: int = 60) -> None:
    """Print a formatted footer line."""
    print("=" * width + "\n")
