"""Route table with first-match-wins lookup.

Routes are registered during setup and frozen when the app starts
serving. Lookup is a linear scan over the routes for one method, in
registration order; route counts are small and the order is the
contract.
"""

from wren.errors import ConfigurationError
from wren.routing.route import METHODS, Route


class Router:
    """Route table grouped by HTTP method.

    Usage::

        router = Router()
        router.add(Route.create("GET", "/users/:id", handler))
        router.compile()
        route = router.find("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, list[Route]] = {method: [] for method in sorted(METHODS)}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route to its method's list. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        method = (route.method or "GET").upper()
        if method not in self._routes:
            allowed = ", ".join(sorted(METHODS))
            msg = f"Unsupported method {route.method!r} for route {route.path!r}. Use one of: {allowed}"
            raise ConfigurationError(msg)
        self._routes[method].append(route)

    def find(self, method: str, path: str) -> Route | None:
        """Return the first route registered for *method* whose pattern matches *path*.

        *path* must not include the query string. Returns ``None`` when no
        route matches or the method is not one the table knows.
        """
        for route in self._routes.get(method.upper(), ()):
            if route.pattern.match(path) is not None:
                return route
        return None

    @property
    def routes(self) -> list[Route]:
        """All registered routes, grouped by method, in registration order."""
        return [route for routes in self._routes.values() for route in routes]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def __len__(self) -> int:
        return sum(len(routes) for routes in self._routes.values())
