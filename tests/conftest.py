"""
Shared pytest setup for the rdf2rdf suite.

Markers:
    unit          no file system beyond tmp_path, fast
    integration   full conversions through the pipeline or CLI
    slow          large generated inputs

RDF and config payloads live in tests/fixtures/; this module turns them
into files on disk.
"""

import json
import logging
import sys
from pathlib import Path

import pytest

TESTS_ROOT = Path(__file__).resolve().parent
for position, entry in enumerate((TESTS_ROOT.parent / "src", TESTS_ROOT)):
    if str(entry) not in sys.path:
        sys.path.insert(position, str(entry))

from fixtures import (
    SINGLE_NT,
    SIMPLE_NT,
    SINGLE_NQ,
    MULTI_GRAPH_NQ,
    SIMPLE_TTL,
    SAMPLE_CONFIG,
)


def pytest_configure(config):
    for marker, help_text in (
        ("unit", "fast tests without real conversions"),
        ("integration", "end-to-end conversions on temporary files"),
        ("slow", "tests over large generated inputs"),
    ):
        config.addinivalue_line("markers", f"{marker}: {help_text}")


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def write_file(tmp_path):
    """Factory writing text or bytes to a file under tmp_path."""
    def _write(name: str, content) -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding='utf-8')
        return path
    return _write


@pytest.fixture
def single_nt_file(write_file):
    """a.nt holding a single triple."""
    return write_file("a.nt", SINGLE_NT)


@pytest.fixture
def simple_nt_file(write_file):
    """N-Triples file with literals, language tags and datatypes."""
    return write_file("simple.nt", SIMPLE_NT)


@pytest.fixture
def single_nq_file(write_file):
    """a.nq holding a single quad."""
    return write_file("a.nq", SINGLE_NQ)


@pytest.fixture
def multi_graph_nq_file(write_file):
    """N-Quads file with one triple repeated across two graphs."""
    return write_file("graphs.nq", MULTI_GRAPH_NQ)


@pytest.fixture
def simple_ttl_file(write_file):
    """Turtle file with prefixes and predicate/object lists."""
    return write_file("simple.ttl", SIMPLE_TTL)


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return json.loads(json.dumps(SAMPLE_CONFIG))


@pytest.fixture
def config_file(tmp_path, sample_config):
    """Write sample config to a temporary file."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(sample_config, indent=2))
    return str(path)


# =============================================================================
# Logging Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def reset_logging():
    """Remove handlers installed by setup_logging after each test."""
    yield
    from rdf2rdf.cli import helpers

    helpers._clear_managed_handlers()
    logging.getLogger().setLevel(logging.WARNING)
