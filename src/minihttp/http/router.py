"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler. Routes are tried in registration order
and the first match wins; anything unmatched gets 404.

=============================================================================
ROUTE PATTERNS
=============================================================================

    "/"              exact match on "/"
    "/user-agent"    exact match
    "/echo/*text"    prefix match; everything after "/echo/" lands in
                     request.path_params["text"], slashes included,
                     possibly empty

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Pattern          Path                  Params                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │   /echo/*text      /echo/abc             {"text": "abc"}            │
    │   /echo/*text      /echo/a/b/            {"text": "a/b/"}           │
    │   /echo/*text      /echo/                {"text": ""}               │
    │   /echo/*text      /echo                 no match                   │
    └─────────────────────────────────────────────────────────────────────┘

Paths are matched exactly as they appeared on the request line: no URL
decoding, no slash normalization.

A route registered with method=None accepts every method. A route whose
pattern matches but whose method doesn't is simply skipped, so the request
can still fall through to a later route or to 404.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, Any, List
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# Handler type: takes a request, returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/files/*filename",
            method="GET",
            handler=read_file,
            _pattern=re.compile(r"^/files/(?P<filename>.*)$"),
        )
    """

    path: str                        # URL pattern (e.g., /echo/*text)
    method: Optional[str]            # HTTP method (None = any method)
    handler: Handler
    name: Optional[str] = None

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """Result of a successful route match."""
    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router.

        router = Router()

        @router.get("/files/*filename")
        def read_file(request):
            ...

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern ("/", "/user-agent", "/echo/*text").
            handler: Function taking a request, returning a response.
            method: HTTP method, or None for any method.
            name: Optional label, shown in route listings.

        Returns:
            The registered Route.
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a route pattern into an anchored regex.

            "/echo/*text"  →  ^/echo/(?P<text>.*)$
            "/user-agent"  →  ^/user\\-agent$

        A "*name" segment must be the last one and captures the rest of
        the path.
        """
        param_names: List[str] = []
        head, star, wildcard = path.partition("*")

        regex = "^" + re.escape(head)
        if star:
            param_name = wildcard or "wildcard"
            param_names.append(param_name)
            regex += f"(?P<{param_name}>.*)"
        regex += "$"

        return re.compile(regex, re.DOTALL), param_names

    # =========================================================================
    # MATCHING & DISPATCH
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching `method` and `path`.

        Returns:
            RouteMatch if found, None otherwise.
        """
        for route in self._routes:
            if route.method and route.method != method:
                continue

            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Path captures are stored on request.path_params before the handler
        runs. No match → 404 Not Found.
        """
        match = self.match(request.method, request.path)
        if match is None:
            return not_found()

        request.path_params = match.params
        return match.route.handler(request)

    # =========================================================================
    # DECORATORS
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

            @router.route("/", name="root")
            def root(request):
                return ok()
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler  # Return handler unchanged (allows stacking decorators)
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST", name)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        """All registered routes, in match order."""
        return list(self._routes)

    def describe(self) -> List[str]:
        """One "METHOD pattern" line per route, for startup logs."""
        return [f"{route.method or '*':<6} {route.path}" for route in self._routes]
