"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m minihttp [--directory DIR]
    minihttp [--directory DIR]

--directory selects the storage root for /files/ (created if missing).
Everything else is read from MINIHTTP_* environment variables, see
ServerConfig.from_env().

=============================================================================
"""

import argparse
import os
import sys

from .server import HTTPServer
from .config import ServerConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Small HTTP/1.1 server over raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  minihttp                          # echo/user-agent only, /files/ disabled
  minihttp --directory /tmp/data    # serve and store files in /tmp/data
  MINIHTTP_PORT=8080 minihttp       # other settings via environment
        """
    )

    parser.add_argument(
        "--directory",
        default=None,
        help="Directory backing /files/ (default: $MINIHTTP_DIRECTORY, else disabled)"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env()
        if args.directory:
            config.directory = os.path.abspath(args.directory)

        server = HTTPServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
