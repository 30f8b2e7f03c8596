"""
Conversion Pipeline.

Drives a statement decoder and encoder through one of two strategies:

    Streaming (default)
        One statement in flight at a time. Each decoded statement is
        written immediately, so memory stays bounded and output order is
        input order.

    Batch
        Every statement is decoded into memory first, then handed to the
        encoder in one call. The encoder may reorder and group statements
        (by subject, then predicate) for a denser serialization. Memory is
        proportional to the input.

Both strategies close the encoder exactly once and abort on the first
decode or encode error. A ConversionJob wraps the driver with format
resolution, policy validation and file handling; reporting goes through an
optional ConversionReporter so the core never prints.

Usage Example:
    ```python
    from rdf2rdf.core import ConversionJob

    job = ConversionJob.from_paths("data.nq", "data.ttl", stream=False)
    result = job.run()
    print(result.get_summary())
    ```
"""

import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Union

from ..constants import ConversionDefaults
from ..formats.protocols import StatementDecoder, StatementEncoder
from ..formats.registry import RDFFormat, create_decoder, create_encoder, get_format_spec, resolve_format
from .memory import MemoryManager
from .policy import PolicyDecision, validate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


# =============================================================================
# Results and reporting
# =============================================================================

@dataclass
class ConversionResult:
    """Outcome of a completed conversion job."""

    statement_count: int
    elapsed_seconds: float
    input_format: RDFFormat
    output_format: RDFFormat
    streamed: bool = True
    context_dropped: bool = False

    def get_summary(self) -> str:
        return f"Done. Converted {self.statement_count} statements in {self.elapsed_seconds:.3f}s."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statementCount": self.statement_count,
            "elapsedSeconds": self.elapsed_seconds,
            "inputFormat": self.input_format.value,
            "outputFormat": self.output_format.value,
            "mode": "stream" if self.streamed else "batch",
            "contextDropped": self.context_dropped,
        }


class ConversionReporter(Protocol):
    """Sink for progress and completion notifications."""

    def on_progress(self, statements: int) -> None:
        """Called with the number of statements written so far."""
        ...

    def on_complete(self, result: ConversionResult) -> None:
        """Called once after a successful conversion."""
        ...


# =============================================================================
# Driver
# =============================================================================

def convert(
    decoder: StatementDecoder,
    encoder: StatementEncoder,
    stream: bool = True,
    *,
    drop_context: bool = False,
    progress: Optional[ProgressCallback] = None,
    progress_interval: int = ConversionDefaults.PROGRESS_INTERVAL,
) -> int:
    """
    Convert every statement from ``decoder`` into ``encoder``.

    Args:
        decoder: Source of statements.
        encoder: Destination for statements; closed exactly once on success.
        stream: Streaming mode when True, batch mode when False.
        drop_context: Strip graph context from every statement before writing.
        progress: Optional callback receiving the running statement count.
        progress_interval: Statements between progress callbacks when streaming.

    Returns:
        Number of statements written.

    Raises:
        DecodeError: Malformed input. In batch mode nothing has been written.
        EncodeError: Write or finalize failure.
    """
    if stream:
        count = 0
        for statement in decoder:
            if drop_context:
                statement = statement.without_context()
            encoder.encode(statement)
            count += 1
            if progress and count % progress_interval == 0:
                progress(count)
    else:
        statements = decoder.decode_all()
        logger.debug(f"Loaded {len(statements)} statements into memory")
        if drop_context:
            statements = [statement.without_context() for statement in statements]
        encoder.encode_all(statements)
        count = len(statements)

    encoder.close()
    if progress:
        progress(count)
    return count


# =============================================================================
# Conversion job
# =============================================================================

@dataclass
class ConversionJob:
    """
    A single file-to-file conversion.

    Built once per invocation with ``from_paths`` (which resolves and
    validates both formats) and executed exactly once with ``run``.
    """

    input_path: Path
    output_path: Path
    decision: PolicyDecision
    stream: bool = ConversionDefaults.STREAM
    _executed: bool = field(default=False, init=False, repr=False)

    @property
    def input_format(self) -> RDFFormat:
        return self.decision.input_format

    @property
    def output_format(self) -> RDFFormat:
        return self.decision.output_format

    @property
    def context_dropping(self) -> bool:
        return self.decision.context_dropping

    @classmethod
    def from_paths(
        cls,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        stream: bool = ConversionDefaults.STREAM,
    ) -> "ConversionJob":
        """
        Resolve formats from file names and validate the pair.

        Raises:
            FormatResolutionError: Unknown extension on either side.
            PolicyError: Identical formats or unsupported output format.
        """
        input_name, output_name = str(input_path), str(output_path)
        decision = validate(
            resolve_format(input_name),
            resolve_format(output_name),
            input_name=input_name,
            output_name=output_name,
        )
        return cls(
            input_path=Path(input_path),
            output_path=Path(output_path),
            decision=decision,
            stream=stream,
        )

    def run(
        self,
        reporter: Optional[ConversionReporter] = None,
        force_memory: bool = False,
    ) -> ConversionResult:
        """
        Execute the job.

        Both files are closed on every exit path. On failure the output file
        keeps whatever the encoder had written before the error.

        Raises:
            RuntimeError: If the job has already been run.
            MemoryError: Batch mode and the input is too large.
            DecodeError, EncodeError: Conversion failures.
            OSError: The input cannot be opened or the output cannot be created.
        """
        if self._executed:
            raise RuntimeError("Conversion job has already been executed")
        self._executed = True

        in_spec = get_format_spec(self.input_format)
        out_spec = get_format_spec(self.output_format)
        mode = "streaming" if self.stream else "batch"
        logger.info(
            f"Converting {self.input_path} ({in_spec.display_name}) to "
            f"{self.output_path} ({out_spec.display_name}) in {mode} mode"
        )

        if not self.stream:
            MemoryManager.ensure_batch_fits(self.input_path, force=force_memory)

        progress = reporter.on_progress if reporter is not None else None

        t0 = time.perf_counter()
        with ExitStack() as stack:
            in_file = stack.enter_context(open(self.input_path, "rb"))
            out_file = stack.enter_context(open(self.output_path, "wb"))
            decoder = create_decoder(self.input_format, in_file, str(self.input_path))
            encoder = create_encoder(self.output_format, out_file)
            count = convert(
                decoder,
                encoder,
                self.stream,
                drop_context=self.context_dropping,
                progress=progress,
            )
        elapsed = time.perf_counter() - t0

        result = ConversionResult(
            statement_count=count,
            elapsed_seconds=elapsed,
            input_format=self.input_format,
            output_format=self.output_format,
            streamed=self.stream,
            context_dropped=self.context_dropping,
        )
        logger.info(f"Converted {count} statements in {elapsed:.3f}s")
        if reporter is not None:
            reporter.on_complete(result)
        return result


def convert_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    stream: bool = ConversionDefaults.STREAM,
    reporter: Optional[ConversionReporter] = None,
    force_memory: bool = False,
) -> ConversionResult:
    """Build and run a ConversionJob in one call."""
    job = ConversionJob.from_paths(input_path, output_path, stream=stream)
    return job.run(reporter=reporter, force_memory=force_memory)
