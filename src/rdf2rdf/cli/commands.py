"""
CLI command implementations.

Commands:
- ConvertCommand: convert one RDF file into another serialization
- FormatsCommand: list supported formats

Every command returns an ExitCode; only main() turns it into a process
exit status.
"""

import argparse
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from tqdm import tqdm

from ..constants import ConversionDefaults, ExitCode
from ..core.pipeline import ConversionJob, ConversionResult
from ..exceptions import DecodeError, EncodeError, FormatResolutionError, PolicyError
from ..formats.registry import list_formats
from .helpers import load_config, print_footer, print_header, setup_logging


logger = logging.getLogger(__name__)


# ============================================================================
# Progress Reporting
# ============================================================================

class TqdmReporter:
    """ConversionReporter that shows a tqdm statement counter and a summary line."""

    def __init__(self, desc: str = "Converting"):
        self.desc = desc
        self._pbar: Optional[tqdm] = None

    def on_progress(self, statements: int) -> None:
        if self._pbar is None:
            self._pbar = tqdm(desc=self.desc, unit=" statements", dynamic_ncols=True, total=None)
        self._pbar.n = statements
        self._pbar.refresh()

    def on_complete(self, result: ConversionResult) -> None:
        self.close()
        print(result.get_summary())

    def close(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None


# ============================================================================
# Base Command Class
# ============================================================================

class BaseCommand(ABC):
    """
    Shared plumbing for rdf2rdf subcommands.

    Holds the optional JSON config and wires its ``logging`` section into
    setup_logging. Subclasses implement execute() and return an ExitCode.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self._config: Optional[Dict[str, Any]] = None

    @property
    def config(self) -> Dict[str, Any]:
        """Lazy-load configuration; empty when no file was given."""
        if self._config is None:
            self._config = load_config(self.config_path) if self.config_path else {}
        return self._config

    def setup_logging_from_config(self, level: Optional[str] = None) -> None:
        """Setup logging from the ``logging`` config section, with a level override."""
        setup_logging(level=level, config=self.config.get('logging', {}))

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> int:
        """
        Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for error).
        """
        pass


# ============================================================================
# Commands
# ============================================================================

class ConvertCommand(BaseCommand):
    """
    Convert an RDF file between serializations.

    Usage:
        convert <input> --output <output> [--no-stream] [--verbose] [--force-memory]
    """

    def execute(self, args: argparse.Namespace) -> int:
        try:
            self.setup_logging_from_config(getattr(args, 'log_level', None))
        except (ValueError, FileNotFoundError, PermissionError) as e:
            print(f"✗ Invalid configuration: {e}")
            return ExitCode.CONFIG_ERROR

        conversion_cfg = self.config.get('conversion', {})
        stream = args.stream if args.stream is not None else conversion_cfg.get('stream', ConversionDefaults.STREAM)
        force_memory = (
            args.force_memory if args.force_memory is not None else conversion_cfg.get('force_memory', False)
        )

        reporter = TqdmReporter() if args.verbose else None
        try:
            job = ConversionJob.from_paths(args.input, args.output, stream=stream)
            if job.context_dropping and args.verbose:
                print("Note: graph contexts are dropped; the output format holds triples only.")
            job.run(reporter=reporter, force_memory=force_memory)
        except (FormatResolutionError, PolicyError) as e:
            print(f"✗ {e}")
            return ExitCode.VALIDATION_ERROR
        except DecodeError as e:
            logger.error(f"Decode failed: {e}")
            print(f"✗ Could not parse input: {e}")
            return ExitCode.DECODE_ERROR
        except EncodeError as e:
            logger.error(f"Encode failed: {e}")
            print(f"✗ Could not write output: {e}")
            return ExitCode.ENCODE_ERROR
        except MemoryError as e:
            print(f"✗ {e}\n\nTip: Drop --no-stream to convert in streaming mode.")
            return ExitCode.MEMORY_ERROR
        except FileNotFoundError as e:
            print(f"✗ File not found: {e.filename or e}")
            return ExitCode.FILE_NOT_FOUND
        except PermissionError as e:
            print(f"✗ Permission denied: {e.filename or e}")
            return ExitCode.PERMISSION_DENIED
        except OSError as e:
            logger.error(f"I/O error: {e}")
            print(f"✗ I/O error: {e}")
            return ExitCode.ERROR
        except KeyboardInterrupt:
            print("\n✗ Conversion cancelled")
            return ExitCode.CANCELLED
        finally:
            if reporter is not None:
                reporter.close()

        return ExitCode.SUCCESS


class FormatsCommand(BaseCommand):
    """List supported formats, their extensions and capabilities."""

    def execute(self, args: argparse.Namespace) -> int:
        print_header("Supported formats")
        for name, info in list_formats().items():
            modes = "/".join(mode for mode in ("read", "write") if info[mode])
            kind = "quads" if info["quads"] else "triples"
            extensions = ", ".join(info["extensions"])
            print(f"  {info['display_name']:<12} {extensions:<22} {kind:<8} {modes}")
        print_footer()
        return ExitCode.SUCCESS
