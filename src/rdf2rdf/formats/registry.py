"""
Format enumeration, lookup table and dispatch helpers.

Formats are resolved from file names by their extension. Every format has a
FormatSpec entry describing its capabilities and the decoder/encoder that
implement it, so adding a format is a change to FORMAT_TABLE only.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, Optional, Tuple, Type

from ..exceptions import PolicyError
from .decoders import BaseDecoder, NQuadsDecoder, NTriplesDecoder, RDFXMLDecoder, TurtleDecoder
from .encoders import BaseEncoder, NTriplesEncoder, RDFXMLEncoder, TurtleEncoder

logger = logging.getLogger(__name__)


class RDFFormat(str, Enum):
    """Supported serialization formats."""
    NTRIPLES = "ntriples"
    NQUADS = "nquads"
    RDFXML = "rdfxml"
    TURTLE = "turtle"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FormatSpec:
    """Capabilities of one serialization format."""

    format: RDFFormat
    display_name: str
    extensions: Tuple[str, ...]
    quads: bool
    decoder: Optional[Type[BaseDecoder]] = None
    encoder: Optional[Type[BaseEncoder]] = None

    @property
    def readable(self) -> bool:
        return self.decoder is not None

    @property
    def writable(self) -> bool:
        return self.encoder is not None


# ---------------------------------------------------------------------------
# Format table
# ---------------------------------------------------------------------------

FORMAT_TABLE: Dict[RDFFormat, FormatSpec] = {
    RDFFormat.NTRIPLES: FormatSpec(
        RDFFormat.NTRIPLES, "N-Triples", ("nt",), quads=False,
        decoder=NTriplesDecoder, encoder=NTriplesEncoder,
    ),
    # No quad encoder: N-Quads can be read but not written.
    RDFFormat.NQUADS: FormatSpec(
        RDFFormat.NQUADS, "N-Quads", ("nq",), quads=True,
        decoder=NQuadsDecoder,
    ),
    RDFFormat.RDFXML: FormatSpec(
        RDFFormat.RDFXML, "RDF/XML", ("rdf", "rdfxml", "xml"), quads=False,
        decoder=RDFXMLDecoder, encoder=RDFXMLEncoder,
    ),
    RDFFormat.TURTLE: FormatSpec(
        RDFFormat.TURTLE, "Turtle", ("ttl",), quads=False,
        decoder=TurtleDecoder, encoder=TurtleEncoder,
    ),
}

EXTENSION_MAP: Dict[str, RDFFormat] = {
    ext: spec.format for spec in FORMAT_TABLE.values() for ext in spec.extensions
}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def file_extension(file_name: str) -> Optional[str]:
    """
    Return the text after the rightmost '.' in ``file_name``.

    Returns None when the name contains no '.' at all, so a missing
    extension is distinct from an empty one ("name.").
    """
    idx = file_name.rfind(".")
    if idx < 0:
        return None
    return file_name[idx + 1:]


def resolve_format(file_name: str) -> Optional[RDFFormat]:
    """
    Map a file name to its format by extension.

    Matching is literal: ``data.TTL`` does not resolve.

    Returns:
        The RDFFormat, or None when the extension is missing or unsupported.
    """
    ext = file_extension(file_name)
    if ext is None:
        return None
    return EXTENSION_MAP.get(ext)


def get_format_spec(fmt: RDFFormat) -> FormatSpec:
    return FORMAT_TABLE[fmt]


def create_decoder(fmt: RDFFormat, stream: BinaryIO, source: str = "<stream>") -> BaseDecoder:
    """
    Return a decoder reading ``fmt`` from ``stream``.

    Raises:
        PolicyError: If the format cannot be decoded.
    """
    spec = get_format_spec(fmt)
    if spec.decoder is None:
        raise PolicyError(f"Parsing {spec.display_name} currently not supported.")
    logger.debug(f"Creating {spec.decoder.__name__} for {source}")
    return spec.decoder(stream, source)


def create_encoder(fmt: RDFFormat, stream: BinaryIO) -> BaseEncoder:
    """
    Return an encoder writing ``fmt`` to ``stream``.

    Raises:
        PolicyError: If the format cannot be encoded.
    """
    spec = get_format_spec(fmt)
    if spec.encoder is None:
        raise PolicyError(f"Serializing to {spec.display_name} currently not supported.")
    logger.debug(f"Creating {spec.encoder.__name__}")
    return spec.encoder(stream)


def list_formats() -> Dict[str, Dict[str, Any]]:
    """
    List all supported formats and their capabilities.

    Returns:
        Dict mapping format names to their info.
    """
    return {
        spec.format.value: {
            "display_name": spec.display_name,
            "extensions": [f".{ext}" for ext in spec.extensions],
            "quads": spec.quads,
            "read": spec.readable,
            "write": spec.writable,
        }
        for spec in FORMAT_TABLE.values()
    }
