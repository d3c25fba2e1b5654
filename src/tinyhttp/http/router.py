"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler function, first match wins.

=============================================================================
ROUTE PATTERNS
=============================================================================

Two kinds of pattern are supported:

    STATIC     "/user-agent"       matches exactly "/user-agent"
    WILDCARD   "/echo/*value"      matches "/echo/" + anything, captured
                                   as value ("" and slashes included)

    Pattern             Path                  Params
    ──────────────────  ────────────────────  ──────────────────────────
    /                   /                     {}
    /echo/*value        /echo/abc             {"value": "abc"}
    /echo/*value        /echo/                {"value": ""}
    /files/*filename    /files/a/b.txt        {"filename": "a/b.txt"}

Paths are matched as received. There is no trailing-slash normalization:
"/echo/abc/" echoes "abc/".

=============================================================================
DISPATCH
=============================================================================

    router.handle(request)
        │
        ├── for route in routes (registration order):
        │       method filter matches?  (None = any method)
        │       pattern matches?
        │           └── return route.handler(request, **params)
        │
        └── nothing matched → 404 Not Found, empty body

A path that exists under a different method is still a 404. This server
does not emit 405.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)

# Handler: takes the request plus captured params, returns a response
Handler = Callable[..., HTTPResponse]


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/files/*filename",
            method="GET",
            handler=files.get,
            _pattern=re.compile(r"^/files/(?P<filename>.*)$"),
        )
    """

    path: str                        # URL pattern (e.g., /echo/*value)
    method: Optional[str]            # HTTP method (None = any method)
    handler: Handler                 # Handler function to call

    # Internal: compiled regex pattern for matching
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)


@dataclass
class RouteMatch:
    """
    Result of a successful route match.

    Example:
        Pattern: /echo/*value
        Path:    /echo/abc
        Result:  RouteMatch(route=<Route>, params={"value": "abc"})
    """
    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router.

        router = Router()

        @router.get("/files/*filename")
        def read_file(request, filename):
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
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g., /echo/*value)
            handler: Called as handler(request, **params)
            method: HTTP method (None for any method)

        Returns:
            The registered Route object
        """
        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            _pattern=self._compile_pattern(path),
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> re.Pattern:
        """
        Compile a path pattern into an anchored regex.

            "/"               → ^/$
            "/user-agent"     → ^/user\\-agent$
            "/echo/*value"    → ^/echo/(?P<value>.*)$

        A "*name" segment captures the rest of the path and must be last.
        """
        head, star, name = path.partition("*")
        if not star:
            return re.compile(f"^{re.escape(path)}$")

        if not name or "/" in name:
            raise ValueError(f"Wildcard must be the last segment: {path}")

        return re.compile(f"^{re.escape(head)}(?P<{name}>.*)$", re.DOTALL)

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Returns:
            RouteMatch if found, None otherwise
        """
        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Args:
            request: The parsed HTTP request

        Returns:
            The handler's response, or 404 when nothing matches
        """
        match = self.match(request.method, request.path)

        if match is None:
            logger.debug(f"No route for {request.method} {request.path}")
            return not_found()

        return match.route.handler(request, **match.params)

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(self, path: str, method: Optional[str] = None) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

        Usage:
            @router.route("/")
            def index(request):
                return ok()
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST")

    def routes(self) -> List[Route]:
        """Get all registered routes, in matching order."""
        return list(self._routes)
