"""
Formats package - statement model, decoders, encoders and the format table.

Components:
- statement: Statement value type shared by every component
- protocols: StatementDecoder / StatementEncoder capability protocols
- decoders: rdflib-backed decoders for N-Triples, N-Quads, Turtle, RDF/XML
- encoders: N-Triples, Turtle and RDF/XML encoders
- registry: format enum, extension lookup table and factories
"""

from .statement import Statement
from .protocols import StatementDecoder, StatementEncoder, is_decoder, is_encoder
from .decoders import (
    BaseDecoder,
    NTriplesDecoder,
    NQuadsDecoder,
    TurtleDecoder,
    RDFXMLDecoder,
)
from .encoders import (
    BaseEncoder,
    NTriplesEncoder,
    TurtleEncoder,
    RDFXMLEncoder,
    EncoderNamespaces,
    format_term,
)
from .registry import (
    RDFFormat,
    FormatSpec,
    FORMAT_TABLE,
    file_extension,
    resolve_format,
    get_format_spec,
    create_decoder,
    create_encoder,
    list_formats,
)

__all__ = [
    "Statement",
    "StatementDecoder",
    "StatementEncoder",
    "is_decoder",
    "is_encoder",
    "BaseDecoder",
    "NTriplesDecoder",
    "NQuadsDecoder",
    "TurtleDecoder",
    "RDFXMLDecoder",
    "BaseEncoder",
    "NTriplesEncoder",
    "TurtleEncoder",
    "RDFXMLEncoder",
    "EncoderNamespaces",
    "format_term",
    "RDFFormat",
    "FormatSpec",
    "FORMAT_TABLE",
    "file_extension",
    "resolve_format",
    "get_format_spec",
    "create_decoder",
    "create_encoder",
    "list_formats",
]
