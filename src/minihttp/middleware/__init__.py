"""
Middleware: layers around the router (chain of responsibility).

    LoggingMiddleware      access log line per request
    CompressionMiddleware  gzip content negotiation
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware
from .compression import CompressionMiddleware

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "CompressionMiddleware",
]
