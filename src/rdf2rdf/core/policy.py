"""
Mode policy: which input/output format pairs may be converted.

Rules are checked in order and the first match wins:

1. identical formats are rejected (no conversion necessary);
2. an unresolved format on either side is rejected;
3. an output format without an encoder (N-Quads) is rejected;
4. everything else is accepted. A quad-capable input written to a
   triple-only output is accepted with ``context_dropping`` set.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..exceptions import FormatResolutionError, PolicyError
from ..formats.registry import RDFFormat, file_extension, get_format_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of an accepted format pair."""

    input_format: RDFFormat
    output_format: RDFFormat
    context_dropping: bool = False


def validate(
    input_format: Optional[RDFFormat],
    output_format: Optional[RDFFormat],
    *,
    input_name: Optional[str] = None,
    output_name: Optional[str] = None,
) -> PolicyDecision:
    """
    Validate a conversion from ``input_format`` to ``output_format``.

    Args:
        input_format: Resolved input format, or None if unresolved.
        output_format: Resolved output format, or None if unresolved.
        input_name: Input file name, used in error messages.
        output_name: Output file name, used in error messages.

    Returns:
        PolicyDecision for the accepted pair.

    Raises:
        PolicyError: Identical formats or unsupported output format.
        FormatResolutionError: Input or output format unresolved.
    """
    if input_format == output_format:
        raise PolicyError("No conversion necessary. Input and output formats are identical.")

    if input_format is None:
        raise FormatResolutionError("input", input_name, _extension(input_name))
    if output_format is None:
        raise FormatResolutionError("output", output_name, _extension(output_name))

    input_spec = get_format_spec(input_format)
    output_spec = get_format_spec(output_format)

    if not output_spec.writable:
        raise PolicyError(f"Serializing to {output_spec.display_name} currently not supported.")

    context_dropping = input_spec.quads and not output_spec.quads
    if context_dropping:
        logger.info(
            f"{output_spec.display_name} cannot express graph context; "
            f"contexts from {input_spec.display_name} input will be dropped"
        )

    return PolicyDecision(
        input_format=input_format,
        output_format=output_format,
        context_dropping=context_dropping,
    )


def _extension(name: Optional[str]) -> Optional[str]:
    return file_extension(name) if name is not None else None
