"""
Core conversion pipeline for rdf2rdf.

This package provides the orchestration layer between decoders and encoders:

- Mode policy (validate, PolicyDecision)
- Conversion driver (convert) and jobs (ConversionJob, convert_file)
- Result and reporting types (ConversionResult, ConversionReporter)
- Batch-mode memory guard (MemoryManager)

Usage:
    from rdf2rdf.core import ConversionJob, convert, validate
"""

from .policy import PolicyDecision, validate
from .memory import MemoryManager
from .pipeline import (
    ConversionJob,
    ConversionReporter,
    ConversionResult,
    ProgressCallback,
    convert,
    convert_file,
)

__all__ = [
    "PolicyDecision",
    "validate",
    "MemoryManager",
    "ConversionJob",
    "ConversionReporter",
    "ConversionResult",
    "ProgressCallback",
    "convert",
    "convert_file",
]
