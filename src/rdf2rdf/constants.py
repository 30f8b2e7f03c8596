"""
Constants shared across rdf2rdf: exit codes, batch-mode memory limits,
pipeline defaults and logging settings.
"""

from enum import IntEnum
from typing import Final

# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Process exit status returned by ``rdf2rdf`` commands.

    0 means success and 1 an unclassified failure; every other value names
    the stage that failed.
    """
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2  # format resolution or conversion policy
    CONFIG_ERROR = 3
    DECODE_ERROR = 4
    FILE_NOT_FOUND = 5
    PERMISSION_DENIED = 6
    CANCELLED = 7
    ENCODE_ERROR = 8
    MEMORY_ERROR = 9


# ============================================================================
# Memory Management
# ============================================================================

class MemoryLimits:
    """Thresholds for the batch-mode pre-flight check."""

    MAX_SAFE_FILE_MB: Final[int] = 500
    """Largest input accepted in batch mode unless --force-memory is given (MB)."""

    MEMORY_MULTIPLIER: Final[float] = 3.5
    """Decoded statements take roughly this many times their on-disk size."""

    MIN_AVAILABLE_MEMORY_MB: Final[int] = 256
    """Free memory below which batch mode is refused (MB)."""

    LOAD_FACTOR: Final[float] = 0.7
    """Share of free memory a batch conversion may plan to use."""


# ============================================================================
# Conversion Defaults
# ============================================================================

class ConversionDefaults:
    """Pipeline defaults used when neither CLI nor config overrides them."""

    STREAM: Final[bool] = True
    """Stream statements straight to the encoder; batch mode is opt-in."""

    PROGRESS_INTERVAL: Final[int] = 1000
    """Progress callback cadence in streaming mode, in statements."""

    INDENT: Final[str] = "    "
    """One level of indentation in Turtle and RDF/XML output."""


# ============================================================================
# Logging Configuration
# ============================================================================

class LoggingConfig:
    """Defaults for the ``logging`` configuration section."""

    DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    JSON_DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S.%fZ"

    DEFAULT_FORMAT_STYLE: Final[str] = "text"
    SUPPORTED_FORMATS: Final[tuple[str, ...]] = ("text", "json")
    """Values accepted for ``logging.format``."""

    MAX_LOG_FILE_MB: Final[int] = 10
    """Size at which a rotating log file rolls over (MB)."""

    LOG_BACKUP_COUNT: Final[int] = 5

    ROTATION_ENABLED: Final[bool] = True
    """Log files rotate unless ``logging.rotation.enabled`` is false."""
