"""
Command-line interface for rdf2rdf.

- parsers: argparse structure
- commands: command implementations
- helpers: logging, configuration and console helpers
"""

from .commands import BaseCommand, ConvertCommand, FormatsCommand, TqdmReporter
from .helpers import JSONFormatter, load_config, setup_logging
from .parsers import create_argument_parser

__all__ = [
    "BaseCommand",
    "ConvertCommand",
    "FormatsCommand",
    "TqdmReporter",
    "JSONFormatter",
    "load_config",
    "setup_logging",
    "create_argument_parser",
]
