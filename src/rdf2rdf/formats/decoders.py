"""
Statement Decoders.

Decoders turn a readable byte stream into a sequence of Statements.
Grammar-level parsing is done by rdflib:

- NTriplesDecoder / NQuadsDecoder: line-at-a-time, driving rdflib's
  W3CNTriplesParser with a sink so only one line is in flight.
- TurtleDecoder / RDFXMLDecoder: rdflib document parsers. These grammars
  are not line-oriented, so the document is loaded into a Graph first and
  statements are yielded from it.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from contextlib import contextmanager
from typing import BinaryIO, Deque, Iterator, List, Optional, Tuple

import rdflib
from rdflib import Graph
from rdflib.exceptions import ParserError
from rdflib.plugins.parsers.ntriples import W3CNTriplesParser, r_tail, r_wspace

from ..exceptions import DecodeError
from .statement import GraphLabel, Statement

logger = logging.getLogger(__name__)


@contextmanager
def literals_as_written() -> Iterator[None]:
    """
    Keep literal lexical forms exactly as parsed.

    rdflib canonicalizes typed literals on construction by default
    (``"01"^^xsd:integer`` becomes ``"1"``). The flag is module-global, so it
    is switched off only for the duration of a parser call.
    """
    previous = rdflib.NORMALIZE_LITERALS
    rdflib.NORMALIZE_LITERALS = False
    try:
        yield
    finally:
        rdflib.NORMALIZE_LITERALS = previous


class _StatementSink:
    """rdflib parser sink that queues statements for the pulling decoder."""

    def __init__(self) -> None:
        self.pending: Deque[Statement] = deque()

    def triple(self, s, p, o) -> None:
        self.pending.append(Statement(s, p, o))

    def quad(self, s, p, o, context: Optional[GraphLabel]) -> None:
        self.pending.append(Statement(s, p, o, context))


class _QuadLineParser(W3CNTriplesParser):
    """N-Triples line parser extended with an optional graph label."""

    def parseline(self, bnode_context=None) -> None:
        self.eat(r_wspace)
        if not self.line or self.line.startswith("#"):
            return
        subject = self.subject(bnode_context)
        self.eat(r_wspace)
        predicate = self.predicate()
        self.eat(r_wspace)
        obj = self.object(bnode_context)
        self.eat(r_wspace)
        context = self.uriref() or self.nodeid(bnode_context) or None
        self.eat(r_tail)
        if self.line:
            raise ParserError(f"Trailing garbage: {self.line}")
        self.sink.quad(subject, predicate, obj, context)


class BaseDecoder(ABC):
    """
    Base class for statement decoders.

    Subclasses implement ``_iter_statements``; iteration, ``decode`` and
    ``decode_all`` share a single underlying iterator so they can be mixed.
    """

    def __init__(self, stream: BinaryIO, source: str = "<stream>") -> None:
        """
        Initialize the decoder.

        Args:
            stream: Readable binary stream positioned at the start of input.
            source: Name used in error messages (usually the file path).
        """
        self.stream = stream
        self.source = source
        self._iterator: Optional[Iterator[Statement]] = None

    def __iter__(self) -> Iterator[Statement]:
        if self._iterator is None:
            self._iterator = self._iter_statements()
        return self._iterator

    def decode(self) -> Optional[Statement]:
        """Return the next statement, or None at end of input."""
        return next(iter(self), None)

    def decode_all(self) -> List[Statement]:
        """Return every remaining statement."""
        return list(self)

    @abstractmethod
    def _iter_statements(self) -> Iterator[Statement]:
        ...


class NTriplesDecoder(BaseDecoder):
    """Line-oriented N-Triples decoder."""

    parser_class = W3CNTriplesParser

    def _read_lines(self) -> Iterator[Tuple[int, str]]:
        line_number = 0
        while True:
            try:
                raw = self.stream.readline()
            except OSError as e:
                raise DecodeError(f"Cannot read input: {e}", self.source, line_number + 1) from e
            if not raw:
                return
            line_number += 1
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"Invalid UTF-8: {e}", self.source, line_number) from e
            yield line_number, line

    def _iter_statements(self) -> Iterator[Statement]:
        sink = _StatementSink()
        parser = self.parser_class(sink=sink)
        count = 0
        for line_number, line in self._read_lines():
            try:
                with literals_as_written():
                    parser.parsestring(line)
            except (ParserError, ValueError) as e:
                # rdflib raises ValueError for bad escapes and language tags
                raise DecodeError(str(e), self.source, line_number) from e
            while sink.pending:
                count += 1
                yield sink.pending.popleft()
        logger.debug(f"Decoded {count} statements from {self.source}")


class NQuadsDecoder(NTriplesDecoder):
    """Line-oriented N-Quads decoder; the graph label becomes the context."""

    parser_class = _QuadLineParser


class GraphDecoder(BaseDecoder):
    """Decoder for document formats parsed whole by rdflib."""

    rdflib_format: str = ""
    label: str = "RDF"

    def _iter_statements(self) -> Iterator[Statement]:
        graph = Graph()
        try:
            with literals_as_written():
                graph.parse(source=self.stream, format=self.rdflib_format)
        except Exception as e:
            raise DecodeError(f"Invalid {self.label} syntax: {e}", self.source) from e
        logger.debug(f"Parsed {len(graph)} statements from {self.source}")
        for s, p, o in graph:
            yield Statement(s, p, o)


class TurtleDecoder(GraphDecoder):
    rdflib_format = "turtle"
    label = "Turtle"


class RDFXMLDecoder(GraphDecoder):
    rdflib_format = "xml"
    label = "RDF/XML"
