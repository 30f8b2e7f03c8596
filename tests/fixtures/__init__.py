"""
Centralized test fixtures for the rdf2rdf test suite.

This package provides reusable fixtures for testing, including:
- N-Triples / N-Quads / Turtle / RDF/XML sample content
- Configuration fixtures

Usage:
    from fixtures import SIMPLE_NT, MULTI_GRAPH_NQ, SAMPLE_CONFIG

Or use the pytest fixtures in conftest.py which import from here.
"""

from .rdf_fixtures import (
    # N-Triples
    SINGLE_NT,
    SIMPLE_NT,
    INTERLEAVED_NT,
    BNODE_NT,
    COMMENTS_NT,
    ESCAPES_NT,
    DUPLICATE_NT,
    NON_CANONICAL_NT,
    MALFORMED_AT_LINE_2_NT,
    INVALID_UTF8_NT,

    # N-Quads
    SINGLE_NQ,
    MULTI_GRAPH_NQ,

    # Turtle / RDF/XML
    SIMPLE_TTL,
    INVALID_TTL,
    SIMPLE_RDFXML,

    # Generators
    generate_ntriples,
)

from .config_fixtures import (
    SAMPLE_CONFIG,
    BATCH_CONFIG,
    JSON_LOGGING_CONFIG,
    INVALID_TYPE_CONFIG,
)

__all__ = [
    "SINGLE_NT",
    "SIMPLE_NT",
    "INTERLEAVED_NT",
    "BNODE_NT",
    "COMMENTS_NT",
    "ESCAPES_NT",
    "DUPLICATE_NT",
    "NON_CANONICAL_NT",
    "MALFORMED_AT_LINE_2_NT",
    "INVALID_UTF8_NT",
    "SINGLE_NQ",
    "MULTI_GRAPH_NQ",
    "SIMPLE_TTL",
    "INVALID_TTL",
    "SIMPLE_RDFXML",
    "generate_ntriples",
    "SAMPLE_CONFIG",
    "BATCH_CONFIG",
    "JSON_LOGGING_CONFIG",
    "INVALID_TYPE_CONFIG",
]
