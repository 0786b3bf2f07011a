"""Request-scoped dispatch records.

Created once per request by the coordinator and discarded after the
invocation they describe completes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wren.services.base import FAIL_SERVICE_NAME

if TYPE_CHECKING:
    from wren.http.request import Request
    from wren.services.base import Service


@dataclass(frozen=True, slots=True)
class RouteRequest:
    """Read-only view of a request: path segments, raw path, HTTP verb.

    Empty segments are dropped, so ``/`` has no segments and
    ``/user//edit/`` has two.
    """

    segments: tuple[str, ...]
    path: str
    method: str

    @classmethod
    def from_path(cls, method: str, path: str) -> RouteRequest:
        segments = tuple(part for part in path.split("/") if part)
        return cls(segments=segments, path=path or "/", method=method.upper())

    @classmethod
    def from_request(cls, request: Request) -> RouteRequest:
        return cls.from_path(request.method, request.path)

    def segment(self, index: int, default: str = "") -> str:
        """Segment at *index*, or *default* when the path is shorter."""
        if 0 <= index < len(self.segments):
            return self.segments[index]
        return default

    def segment_arguments(self, offset: int) -> tuple[str, ...]:
        """Segments from *offset* on: the raw positional method arguments."""
        return self.segments[offset:]


@dataclass(frozen=True, slots=True)
class DispatchFailure:
    """Why a request was routed to the fail service."""

    code: int
    text: str


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """A service instance, the method to call, and its bound arguments.

    ``failure`` is set when resolution fell back to the fail service; the
    server applies ``failure.code`` as the response status.
    """

    service: Service
    name: str
    method: str
    arguments: tuple[Any, ...] = ()
    failure: DispatchFailure | None = None

    @property
    def is_failure(self) -> bool:
        """True when the target is the fail service."""
        return self.failure is not None or self.name == FAIL_SERVICE_NAME

    @property
    def status(self) -> int:
        return self.failure.code if self.failure is not None else 200
