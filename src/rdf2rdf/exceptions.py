"""
Typed failures raised by the conversion pipeline.

Every error here is fatal to a conversion job. The core raises them and
leaves exit behaviour to the caller (see ``rdf2rdf.cli``).
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""


class FormatResolutionError(ConversionError):
    """Raised when a file name does not map to a known format."""

    def __init__(self, side: str, file_name: Optional[str], extension: Optional[str]):
        self.side = side
        self.file_name = file_name
        self.extension = extension
        if extension is None:
            message = f"Unknown file format. No file extension on {side} file."
        else:
            message = f"Unsupported file extension on {side} file: {file_name}"
        super().__init__(message)


class PolicyError(ConversionError):
    """Raised when a format pair is rejected by the mode policy."""


class DecodeError(ConversionError):
    """Raised on malformed or unreadable input."""

    def __init__(self, message: str, source: str = "<stream>", line: Optional[int] = None):
        self.source = source
        self.line = line
        self.message = message
        location = f"{source}:{line}" if line is not None else source
        super().__init__(f"{location}: {message}")


class EncodeError(ConversionError):
    """Raised when a statement cannot be written or the output cannot be finalized."""
