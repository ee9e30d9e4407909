"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the router like layers of an onion. Each layer gets the
request and a `next` callable, and decides what to do before and after
calling it:

    class Timing(Middleware):
        def __call__(self, request, next):
            start = time.time()                # before
            response = next(request)           # inner layers + router
            elapsed = time.time() - start      # after
            return response

    ┌─────────────────────────────────────────────────────────┐
    │  LoggingMiddleware                                      │
    │  ┌───────────────────────────────────────────────────┐  │
    │  │                                                   │  │
    │  │              router.handle                        │  │
    │  │                                                   │  │
    │  └───────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────┘

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware or the final handler: request in, response out
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

    Subclasses implement __call__(request, next) and must call
    next(request) unless they short-circuit with their own response.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The next handler in the chain

        Returns:
            HTTP response (either from next() or short-circuited)
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware together around a final handler.

    First added = outermost:

        pipeline.add(A()).add(B())
        handler = pipeline.wrap(router.handle)    # A → B → router
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Add middleware to the pipeline. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        We wrap in REVERSE order so that the first-added middleware ends
        up as the outermost wrapper.
        """
        current = handler

        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)

        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        # Closure over this layer and the one inside it
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)
