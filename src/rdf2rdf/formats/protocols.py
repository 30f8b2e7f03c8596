"""
Protocol Definitions for Statement Decoders and Encoders.

This module defines the two capabilities the conversion pipeline consumes.
Using protocols allows any concrete grammar implementation to be
substituted without touching the driver.

Protocols:
    StatementDecoder: Pull statements from a readable byte stream
    StatementEncoder: Push statements to a writable byte stream
"""

from typing import Iterable, Iterator, List, Optional, Protocol, runtime_checkable

from .statement import Statement


__all__ = [
    "StatementDecoder",
    "StatementEncoder",
    "is_decoder",
    "is_encoder",
]


@runtime_checkable
class StatementDecoder(Protocol):
    """
    Protocol for reading statements from a serialized source.

    Decoders are iterable; iteration stops at end of input. A malformed
    statement raises ``DecodeError`` and ends the iteration.

    Example implementation:
        class LineDecoder:
            def __iter__(self):
                for line in self.stream:
                    yield parse(line)

            def decode(self):
                return next(self._iterator, None)

            def decode_all(self):
                return list(self)
    """

    def __iter__(self) -> Iterator[Statement]:
        """Iterate over the remaining statements."""
        ...

    def decode(self) -> Optional[Statement]:
        """
        Decode the next statement.

        Returns:
            The next Statement, or None at end of input.

        Raises:
            DecodeError: If the input is malformed or unreadable.
        """
        ...

    def decode_all(self) -> List[Statement]:
        """
        Decode every remaining statement.

        Raises:
            DecodeError: If any statement is malformed. Nothing is returned
                in that case.
        """
        ...


@runtime_checkable
class StatementEncoder(Protocol):
    """
    Protocol for writing statements to a serialized sink.

    ``close`` must be called exactly once after the last write. Encoders
    do not close the stream they were constructed with.
    """

    def encode(self, statement: Statement) -> None:
        """
        Write a single statement.

        Raises:
            EncodeError: On I/O failure or a statement the format cannot express.
        """
        ...

    def encode_all(self, statements: Iterable[Statement]) -> None:
        """
        Write a complete collection of statements.

        Implementations may reorder and group statements to produce a
        denser serialization, but must write every statement given.
        """
        ...

    def close(self) -> None:
        """
        Finalize the output (closing tags, trailing terminators, flush).

        Raises:
            EncodeError: On I/O failure or if already closed.
        """
        ...


def is_decoder(obj: object) -> bool:
    """Check if an object implements StatementDecoder."""
    return isinstance(obj, StatementDecoder)


def is_encoder(obj: object) -> bool:
    """Check if an object implements StatementEncoder."""
    return isinstance(obj, StatementEncoder)
