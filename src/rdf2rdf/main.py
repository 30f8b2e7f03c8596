#!/usr/bin/env python3
"""
rdf2rdf command-line entry point.

Usage:
    rdf2rdf convert <input> --output <output> [--no-stream] [--verbose]
    rdf2rdf formats
"""

import sys
from typing import Dict, List, Optional, Type

from .cli.commands import BaseCommand, ConvertCommand, FormatsCommand
from .cli.parsers import create_argument_parser
from .constants import ExitCode

COMMANDS: Dict[str, Type[BaseCommand]] = {
    'convert': ConvertCommand,
    'formats': FormatsCommand,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.ERROR

    command = COMMANDS[args.command](config_path=getattr(args, 'config', None))
    return int(command.execute(args))


if __name__ == '__main__':
    sys.exit(main())
