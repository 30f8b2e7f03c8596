"""
Statement model shared by decoders, encoders and the pipeline.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from rdflib import BNode, Literal, URIRef

# Type aliases
Subject = Union[URIRef, BNode]
Term = Union[URIRef, BNode, Literal]
GraphLabel = Union[URIRef, BNode]


@dataclass(frozen=True, slots=True)
class Statement:
    """A subject-predicate-object statement with an optional graph context."""

    subject: Subject
    predicate: URIRef
    object: Term
    context: Optional[GraphLabel] = None

    @property
    def has_context(self) -> bool:
        return self.context is not None

    @property
    def triple(self) -> Tuple[Subject, URIRef, Term]:
        return (self.subject, self.predicate, self.object)

    def without_context(self) -> "Statement":
        """Return this statement with its graph context removed."""
        if self.context is None:
            return self
        return replace(self, context=None)
