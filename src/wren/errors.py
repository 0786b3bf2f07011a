"""Wren exception hierarchy.

Shared across the dispatcher, services, and the server pipeline so every
module raises and catches the same types.

Routing misses (unknown service, unknown method) are not exceptions: the
dispatcher recovers from them by routing to the fail service.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app or route configuration is invalid.

    A regex route without ``pattern`` or ``method`` raises this while the
    route table is being scanned; it is never recovered.
    """


class ServiceError(WrenError):
    """Raised when a service class is misdeclared or misused."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by services while serving. The ASGI handler catches these and
    dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing to serve for the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the service refuses this HTTP method.

    Includes an ``Allow`` header listing the accepted methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
