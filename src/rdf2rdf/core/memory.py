"""
Memory guard for batch conversion.

Batch mode holds every statement of the input in memory before writing.
MemoryManager estimates the footprint from the file size so that a
conversion that would not fit fails before anything is read.
"""

import logging
from pathlib import Path
from typing import NamedTuple, Tuple, Union

import psutil

from ..constants import MemoryLimits

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


class MemoryEstimate(NamedTuple):
    """Sizes (MB) that a batch-mode decision is based on."""

    file_mb: float
    needed_mb: float
    available_mb: float
    budget_mb: float

    def summary(self) -> str:
        return (
            f"input {self.file_mb:.1f}MB, needs ~{self.needed_mb:.0f}MB, "
            f"budget {self.budget_mb:.0f}MB of {self.available_mb:.0f}MB free"
        )


class MemoryManager:
    """Pre-flight checks before a whole input file is decoded into memory."""

    MIN_AVAILABLE_MB = MemoryLimits.MIN_AVAILABLE_MEMORY_MB
    MAX_SAFE_FILE_MB = MemoryLimits.MAX_SAFE_FILE_MB
    MEMORY_MULTIPLIER = MemoryLimits.MEMORY_MULTIPLIER
    LOAD_FACTOR = MemoryLimits.LOAD_FACTOR

    @staticmethod
    def get_available_memory_mb() -> float:
        """
        Free system memory in MB.

        Falls back to MIN_AVAILABLE_MB when psutil cannot read it.
        """
        try:
            free_bytes = psutil.virtual_memory().available
        except OSError as e:
            logger.warning(f"Free memory unknown, assuming {MemoryManager.MIN_AVAILABLE_MB}MB: {e}")
            return float(MemoryManager.MIN_AVAILABLE_MB)
        return free_bytes / _MB

    @classmethod
    def estimate(cls, file_size_mb: float) -> MemoryEstimate:
        available = cls.get_available_memory_mb()
        return MemoryEstimate(
            file_mb=file_size_mb,
            needed_mb=file_size_mb * cls.MEMORY_MULTIPLIER,
            available_mb=available,
            budget_mb=available * cls.LOAD_FACTOR,
        )

    @classmethod
    def check_memory_available(cls, file_size_mb: float, force: bool = False) -> Tuple[bool, str]:
        """
        Decide whether a file of ``file_size_mb`` may be converted in batch mode.

        ``force`` lifts the size cap and the free-memory floor, and turns an
        over-budget estimate into a warning instead of a refusal.

        Returns:
            Tuple of (can_proceed, message). A message starting with
            ``WARNING`` means the conversion proceeds under --force-memory.
        """
        if not force and file_size_mb > cls.MAX_SAFE_FILE_MB:
            return False, (
                f"{file_size_mb:.1f}MB is above the {cls.MAX_SAFE_FILE_MB}MB batch-mode cap "
                f"(~{file_size_mb * cls.MEMORY_MULTIPLIER:.0f}MB once decoded). "
                f"Convert in streaming mode, or pass --force-memory."
            )

        est = cls.estimate(file_size_mb)

        if not force and est.available_mb < cls.MIN_AVAILABLE_MB:
            return False, (
                f"Insufficient free memory for batch mode: {est.available_mb:.0f}MB free, "
                f"at least {cls.MIN_AVAILABLE_MB}MB needed."
            )

        if est.needed_mb <= est.budget_mb:
            return True, f"Memory OK: {est.summary()}"

        if force:
            return True, f"WARNING: batch conversion over memory budget ({est.summary()}); continuing because of --force-memory."
        return False, (
            f"Input is too large to convert in batch mode ({est.summary()}). "
            f"Convert in streaming mode, or pass --force-memory."
        )

    @classmethod
    def ensure_batch_fits(cls, path: Union[str, Path], force: bool = False) -> None:
        """
        Raise MemoryError unless ``path`` can be converted in batch mode.

        Raises:
            MemoryError: If the check refuses the file.
        """
        size_mb = Path(path).stat().st_size / _MB
        ok, message = cls.check_memory_available(size_mb, force=force)
        if not ok:
            logger.error(message)
            raise MemoryError(message)
        logger.log(logging.WARNING if message.startswith("WARNING") else logging.DEBUG, message)
