"""
rdf2rdf - convert RDF data between N-Triples, N-Quads, Turtle and RDF/XML.

Usage:
    from rdf2rdf import convert_file

    result = convert_file("data.nt", "data.ttl")
    print(result.get_summary())
"""

from .core import ConversionJob, ConversionResult, convert, convert_file, validate
from .exceptions import ConversionError, DecodeError, EncodeError, FormatResolutionError, PolicyError
from .formats import RDFFormat, Statement, resolve_format

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "ConversionJob",
    "ConversionResult",
    "convert",
    "convert_file",
    "validate",
    "ConversionError",
    "DecodeError",
    "EncodeError",
    "FormatResolutionError",
    "PolicyError",
    "RDFFormat",
    "Statement",
    "resolve_format",
]
