"""
=============================================================================
MINIHTTP - A Small HTTP/1.1 Server Over Raw Sockets
=============================================================================

A single-process server that reads requests straight off TCP sockets,
tolerating partial delivery, and answers a fixed set of endpoints:

    GET  /                  200, empty
    GET  /echo/<text>       200, <text>
    GET  /user-agent        200, the User-Agent header
    GET  /files/<name>      200 with the stored file, or 404
    POST /files/<name>      201, stores the request body

Responses are gzip-compressed when the client sends Accept-Encoding: gzip,
and connections stay open for further requests until the client sends
Connection: close or hangs up.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer and the per-connection loop
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Transport
    │   ├── socket_server.py # Listening socket, accept loop
    │   ├── connection.py    # One client connection
    │   └── stream.py        # read(n) / read_line() over partial recv()s
    ├── http/                # Protocol
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response building and serialization
    │   ├── router.py        # URL routing
    │   └── status_codes.py  # HTTP status enum
    ├── middleware/
    │   ├── base.py          # Middleware ABC and pipeline
    │   ├── logging.py       # Access log
    │   └── compression.py   # gzip negotiation
    └── handlers/
        ├── endpoints.py     # The endpoint table
        └── storage.py       # Blob store for /files/

=============================================================================
QUICK START
=============================================================================

    $ minihttp --directory /tmp/data
    $ curl -v localhost:4221/echo/hello
    $ curl -v --data-binary @notes.txt localhost:4221/files/notes.txt

    # or from Python
    from minihttp import HTTPServer, ServerConfig
    HTTPServer(ServerConfig(directory="/tmp/data")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
