"""Method resolution — which method of a service handles the request.

Rules, in precedence order, for a service that is not the fail service:

1. A method supplied by an alias or regex route is kept verbatim.
2. ``use_main_only`` services always get ``main``.
3. Site services read the second path segment: an alias method-map hit is
   transformed through the map, ``""`` and ``"main"`` mean ``main``, and
   anything else goes through :func:`~wren.routing.names.to_method_name`.
4. Rest services use the lower-cased HTTP verb.

A chosen method the service does not expose falls back to ``fall`` when
the service declares it, otherwise resolution fails and the coordinator
switches to the fail service.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from wren.routing.names import to_method_name
from wren.services.base import METHOD_FALL, METHOD_MAIN, REST_METHODS
from wren.services.registry import ServiceRegistry

if TYPE_CHECKING:
    from wren.dispatch.types import RouteRequest
    from wren.services.base import Service


class MethodState(Enum):
    """Outcome of method resolution."""

    RESOLVED = "resolved"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class MethodResolution:
    """Resolved method plus the method originally derived from the request.

    ``method`` is None when ``state`` is FAILED; ``requested`` always names
    what the rules produced, for the failure message.
    """

    state: MethodState
    requested: str
    method: str | None


class MethodResolver:
    """Stateless: one instance serves every request."""

    __slots__ = ()

    def derive(
        self,
        service: Service,
        request: RouteRequest,
        *,
        supplied: str | None = None,
        method_map: Mapping[str, str] | None = None,
    ) -> str:
        """Apply the protocol rules and return the candidate method name."""
        if supplied:
            return supplied

        if service.use_main_only:
            return METHOD_MAIN

        if service.is_site:
            raw = request.segment(1).lower()
            if method_map and raw in method_map:
                return to_method_name(method_map[raw])
            if raw in ("", METHOD_MAIN):
                return METHOD_MAIN
            return to_method_name(raw)

        if service.is_rest:
            return request.method.lower()

        return METHOD_MAIN

    def resolve(
        self,
        service: Service,
        request: RouteRequest,
        *,
        supplied: str | None = None,
        method_map: Mapping[str, str] | None = None,
    ) -> MethodResolution:
        """Derive the method and check it exists, trying ``fall`` second."""
        method = self.derive(service, request, supplied=supplied, method_map=method_map)

        exists = ServiceRegistry.method_exists(service, method)
        # Verb-derived names only dispatch to real verb methods
        if exists and service.is_rest and not supplied and not service.use_main_only:
            exists = method in REST_METHODS

        if exists:
            return MethodResolution(MethodState.RESOLVED, method, method)
        if ServiceRegistry.fallback_method_exists(service):
            return MethodResolution(MethodState.FALLBACK, method, METHOD_FALL)
        return MethodResolution(MethodState.FAILED, method, None)
