"""
Argument parsing for the rdf2rdf command line.

Usage:
    - convert <input> --output <output> [--no-stream] [--verbose] [--force-memory]
    - formats
"""

import argparse


# ============================================================================
# Shared Flag Group Builders
# ============================================================================

def add_config_flags(parser: argparse.ArgumentParser) -> None:
    """--config and --log-level, shared by commands that log."""
    parser.add_argument(
        '--config', '-c',
        help='Path to JSON configuration file'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        type=str.upper,
        help='Log level (overrides the configuration file)'
    )


def add_performance_flags(parser: argparse.ArgumentParser) -> None:
    """--no-stream and --force-memory; both default to None so config values apply."""
    parser.add_argument(
        '--no-stream',
        dest='stream',
        action='store_false',
        default=None,
        help=(
            'Load the whole input before writing (batch mode). Produces more '
            'compact Turtle/RDF-XML at the cost of memory'
        )
    )
    parser.add_argument(
        '--force-memory',
        action='store_true',
        default=None,
        help='Skip memory safety checks for very large files in batch mode (use with caution)'
    )


# ============================================================================
# Main Parser Factory
# ============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with the convert and formats subcommands."""
    parser = argparse.ArgumentParser(
        prog='rdf2rdf',
        description="Convert RDF data between N-Triples, N-Quads, Turtle and RDF/XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Stream N-Triples into Turtle
    %(prog)s convert data.nt --output data.ttl

    # Compact Turtle output (batch mode) with progress
    %(prog)s convert dump.nq --output dump.ttl --no-stream --verbose

    # Show supported formats
    %(prog)s formats
        """,
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    _add_convert_parser(subparsers)
    _add_formats_parser(subparsers)

    return parser


# ============================================================================
# Command Parsers
# ============================================================================

def _add_convert_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the convert command parser."""
    parser = subparsers.add_parser(
        'convert',
        help='Convert an RDF file to another serialization'
    )
    parser.add_argument('input', help='Input file; format is taken from its extension')
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Output file; format is taken from its extension'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show a progress counter and a summary line'
    )
    add_performance_flags(parser)
    add_config_flags(parser)


def _add_formats_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the formats command parser."""
    subparsers.add_parser(
        'formats',
        help='List supported formats and file extensions'
    )
