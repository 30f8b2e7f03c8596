"""
Statement Encoders.

Encoders write Statements to a writable byte stream. Each encoder keeps at
most the previous subject/predicate in memory when streaming, so consecutive
statements sharing a subject are grouped without buffering. ``encode_all``
sorts the complete collection by subject and predicate first, which turns
that local grouping into maximal predicate and object lists.

Terms are rendered by rdflib (``n3()`` and the N-Triples serializer's
literal quoting); prefixes are held in an rdflib NamespaceManager.

Encoders never deduplicate and never close the stream they write to.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape, quoteattr

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import OWL, RDF, RDFS, XSD, NamespaceManager, split_uri
from rdflib.plugins.serializers.nt import _quoteLiteral

from ..constants import ConversionDefaults
from ..exceptions import EncodeError
from .statement import Statement, Term

logger = logging.getLogger(__name__)

INDENT = ConversionDefaults.INDENT

DEFAULT_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("rdf", str(RDF)),
    ("rdfs", str(RDFS)),
    ("xsd", str(XSD)),
    ("owl", str(OWL)),
)

# Characters XML 1.0 cannot carry, not even as character references
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


# ============================================================================
# Term rendering
# ============================================================================

class EncoderNamespaces(NamespaceManager):
    """
    Prefix bindings for Turtle and RDF/XML output.

    Unlike a plain NamespaceManager, rendering a term never invents a new
    prefix: only namespaces bound up front (or through ``bind_generated``
    before the document starts) are abbreviated.
    """

    def __init__(self, bindings: Iterable[Tuple[str, str]] = DEFAULT_PREFIXES) -> None:
        super().__init__(Graph(bind_namespaces="none"), bind_namespaces="none")
        self._generated = 0
        for prefix, namespace in bindings:
            self.bind_if_new(prefix, namespace)

    def prefix_for(self, namespace: str) -> Optional[str]:
        return self.store.prefix(URIRef(namespace))

    def bind_if_new(self, prefix: str, namespace: str) -> str:
        """Bind ``namespace`` unless it already has a prefix; return its prefix."""
        existing = self.prefix_for(namespace)
        if existing is not None:
            return existing
        self.bind(prefix, URIRef(namespace))
        return self.prefix_for(namespace)

    def bind_generated(self, namespace: str) -> str:
        """Bind ``namespace`` to the next free ``nsN`` prefix unless already bound."""
        existing = self.prefix_for(namespace)
        if existing is not None:
            return existing
        prefix = None
        while prefix is None or self.store.namespace(prefix) is not None:
            self._generated += 1
            prefix = f"ns{self._generated}"
        return self.bind_if_new(prefix, namespace)

    def bindings(self) -> List[Tuple[str, str]]:
        """(prefix, namespace) pairs in binding order."""
        return [(prefix, str(namespace)) for prefix, namespace in self.namespaces()]

    def turtle_name(self, iri: str) -> Optional[str]:
        """Prefixed name for ``iri``, or None when it cannot be written as one in Turtle."""
        if self.prefix_for(iri) is not None:
            return None
        try:
            prefix, _, local = self.compute_qname(iri, generate=False)
        except (KeyError, ValueError):
            return None
        # Same restrictions rdflib's Turtle serializer applies to local names
        if not local or not (local[0].isalpha() or local[0] == "_"):
            return None
        if local.endswith(".") or any(ch in local for ch in "()%"):
            return None
        return f"{prefix}:{local}"

    def normalizeUri(self, rdfTerm: str) -> str:
        qname = self.turtle_name(rdfTerm)
        return qname if qname is not None else f"<{rdfTerm}>"


def format_term(term: Term, namespaces: Optional[EncoderNamespaces] = None) -> str:
    """
    Render a term in N-Triples syntax, or Turtle syntax when ``namespaces`` is given.

    Raises:
        EncodeError: If rdflib refuses to serialize the term (e.g. an IRI
            containing spaces or angle brackets).
    """
    if not isinstance(term, (URIRef, BNode, Literal)):
        raise EncodeError(f"Unsupported term type: {type(term).__name__}")
    try:
        if namespaces is None and isinstance(term, Literal):
            # Literal.n3() triple-quotes multi-line text, which N-Triples does not allow
            return _quoteLiteral(term)
        return term.n3(namespaces)
    except Exception as e:  # URIRef.n3() raises a bare Exception for invalid IRIs
        raise EncodeError(f"Cannot serialize term {str(term)!r}: {e}") from e


def _term_key(term: Term) -> Tuple[str, str]:
    return (type(term).__name__, str(term))


def sort_statements(statements: Iterable[Statement], by_predicate: bool = True) -> List[Statement]:
    """Stable sort clustering statements by subject (and predicate)."""
    if by_predicate:
        return sorted(statements, key=lambda st: (_term_key(st.subject), _term_key(st.predicate)))
    return sorted(statements, key=lambda st: _term_key(st.subject))


# ============================================================================
# Encoders
# ============================================================================

class BaseEncoder(ABC):
    """
    Base class for statement encoders.

    Subclasses implement ``_encode`` and optionally ``_finish``. The base
    class enforces the write-then-close-once lifecycle and maps I/O
    failures to EncodeError.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self.closed = False

    def _check_open(self) -> None:
        if self.closed:
            raise EncodeError("Encoder is already closed")

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text.encode("utf-8"))
        except (OSError, ValueError) as e:
            raise EncodeError(f"Cannot write output: {e}") from e

    def encode(self, statement: Statement) -> None:
        self._check_open()
        self._encode(statement)

    def encode_all(self, statements: Iterable[Statement]) -> None:
        self._check_open()
        for statement in statements:
            self._encode(statement)

    def close(self) -> None:
        self._check_open()
        self.closed = True
        self._finish()
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise EncodeError(f"Cannot flush output: {e}") from e

    @abstractmethod
    def _encode(self, statement: Statement) -> None:
        ...

    def _finish(self) -> None:
        pass


class NTriplesEncoder(BaseEncoder):
    """One statement per line; any context is ignored."""

    def _encode(self, statement: Statement) -> None:
        s, p, o = (format_term(t) for t in statement.triple)
        self._write(f"{s} {p} {o} .\n")

    def encode_all(self, statements: Iterable[Statement]) -> None:
        super().encode_all(sort_statements(statements))


class TurtleEncoder(BaseEncoder):
    """
    Turtle encoder with prefix abbreviation and predicate/object lists.

    Streaming output groups consecutive statements with the same subject
    (``;``) and the same subject and predicate (``,``). ``encode_all`` sorts
    first and binds a prefix for every predicate and class namespace.
    """

    def __init__(self, stream: BinaryIO, namespaces: Optional[EncoderNamespaces] = None) -> None:
        super().__init__(stream)
        self.namespaces = namespaces if namespaces is not None else EncoderNamespaces()
        self._started = False
        self._subject: Optional[Term] = None
        self._predicate: Optional[URIRef] = None

    def _start(self) -> None:
        if self._started:
            return
        self._started = True
        header = "".join(f"@prefix {prefix}: <{ns}> .\n" for prefix, ns in self.namespaces.bindings())
        if header:
            self._write(header + "\n")

    def _format_predicate(self, predicate: URIRef) -> str:
        if predicate == RDF.type:
            return "a"
        return format_term(predicate, self.namespaces)

    def _encode(self, statement: Statement) -> None:
        self._start()
        s, p = statement.subject, statement.predicate
        obj = format_term(statement.object, self.namespaces)
        if s == self._subject and p == self._predicate:
            text = f", {obj}"
        elif s == self._subject:
            text = f" ;\n{INDENT}{self._format_predicate(p)} {obj}"
        else:
            subject = format_term(s, self.namespaces)
            lead = " .\n\n" if self._subject is not None else ""
            text = f"{lead}{subject} {self._format_predicate(p)} {obj}"
        self._write(text)
        self._subject, self._predicate = s, p

    def encode_all(self, statements: Iterable[Statement]) -> None:
        ordered = sort_statements(statements)
        if not self._started:
            for statement in ordered:
                self._bind_namespace(statement.predicate)
                if statement.predicate == RDF.type and isinstance(statement.object, URIRef):
                    self._bind_namespace(statement.object)
        super().encode_all(ordered)

    def _bind_namespace(self, iri: URIRef) -> None:
        try:
            namespace, _ = split_uri(iri)
        except ValueError:
            return
        self.namespaces.bind_generated(namespace)

    def _finish(self) -> None:
        self._start()
        if self._subject is not None:
            self._write(" .\n")


def _xml_value(value: str) -> str:
    """Return ``value`` unchanged, or raise EncodeError if XML 1.0 cannot hold it."""
    match = _XML_ILLEGAL.search(value)
    if match:
        raise EncodeError(f"Character U+{ord(match.group()):04X} cannot be written to RDF/XML: {value!r}")
    return value


class RDFXMLEncoder(BaseEncoder):
    """
    RDF/XML encoder writing one rdf:Description per run of equal subjects.

    Predicate namespaces known when the document starts are declared on the
    root element; others are declared on the property element itself.
    """

    INLINE_PREFIX = "ns0"

    def __init__(self, stream: BinaryIO, namespaces: Optional[EncoderNamespaces] = None) -> None:
        super().__init__(stream)
        self.namespaces = namespaces if namespaces is not None else EncoderNamespaces()
        self._started = False
        self._subject: Optional[Term] = None

    def _start(self) -> None:
        if self._started:
            return
        self._started = True
        declarations = "".join(
            f"\n{INDENT}xmlns:{prefix}={quoteattr(ns)}" for prefix, ns in self.namespaces.bindings()
        )
        self._write(f'<?xml version="1.0" encoding="utf-8"?>\n<rdf:RDF{declarations}>\n')

    @staticmethod
    def _iri_attribute(name: str, iri: URIRef) -> str:
        format_term(iri)
        return f"rdf:{name}={quoteattr(_xml_value(str(iri)))}"

    def _node_attribute(self, node: Term, iri_attribute: str) -> str:
        if isinstance(node, BNode):
            return f"rdf:nodeID={quoteattr(str(node))}"
        return self._iri_attribute(iri_attribute, node)

    def _property_element(self, predicate: URIRef, obj: Term) -> str:
        format_term(predicate)
        try:
            namespace, local = split_uri(predicate)
        except ValueError as e:
            raise EncodeError(f"Cannot split predicate into namespace and local name: {predicate}") from e
        prefix = self.namespaces.prefix_for(namespace)
        declaration = ""
        if prefix is None:
            prefix = self.INLINE_PREFIX
            declaration = f" xmlns:{prefix}={quoteattr(_xml_value(namespace))}"
        tag = f"{prefix}:{local}"
        indent = INDENT * 2

        if isinstance(obj, URIRef):
            return f"{indent}<{tag}{declaration} {self._node_attribute(obj, 'resource')}/>\n"
        if isinstance(obj, BNode):
            return f"{indent}<{tag}{declaration} {self._node_attribute(obj, 'nodeID')}/>\n"
        if isinstance(obj, Literal):
            attributes = declaration
            if obj.language:
                attributes += f" xml:lang={quoteattr(obj.language)}"
            elif obj.datatype is not None:
                attributes += " " + self._iri_attribute("datatype", obj.datatype)
            # a raw CR would be read back as LF
            text = escape(_xml_value(str(obj)), {"\r": "&#13;"})
            return f"{indent}<{tag}{attributes}>{text}</{tag}>\n"
        raise EncodeError(f"Unsupported term type: {type(obj).__name__}")

    def _encode(self, statement: Statement) -> None:
        self._start()
        parts = []
        if statement.subject != self._subject:
            if self._subject is not None:
                parts.append(f"{INDENT}</rdf:Description>\n")
            parts.append(f"{INDENT}<rdf:Description {self._node_attribute(statement.subject, 'about')}>\n")
        parts.append(self._property_element(statement.predicate, statement.object))
        self._write("".join(parts))
        self._subject = statement.subject

    def encode_all(self, statements: Iterable[Statement]) -> None:
        ordered = sort_statements(statements, by_predicate=False)
        if not self._started:
            for statement in ordered:
                try:
                    namespace, _ = split_uri(statement.predicate)
                except ValueError:
                    continue
                self.namespaces.bind_generated(namespace)
        super().encode_all(ordered)

    def _finish(self) -> None:
        self._start()
        if self._subject is not None:
            self._write(f"{INDENT}</rdf:Description>\n")
        self._write("</rdf:RDF>\n")
