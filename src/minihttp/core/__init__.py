"""
=============================================================================
CORE: SOCKETS, CONNECTIONS AND BYTE STREAMS
=============================================================================

The transport layer, with no HTTP knowledge:

    socket_server.py   listening socket, accept loop, shutdown
    connection.py      one accepted socket, its state and diagnostic id
    stream.py          exact-count and line reads over partial deliveries

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, next_connection_id
from .stream import ByteStream

__all__ = [
    "SocketServer",      # TCP listener - accepts connections
    "Connection",        # Wrapper for client socket
    "ConnectionState",   # Enum for connection lifecycle states
    "ByteStream",        # read(n) / read_line() over a raw receiver
    "next_connection_id",
]
