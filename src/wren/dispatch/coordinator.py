"""Dispatch coordinator — request in, resolved target out.

Resolution runs as a fixed sequence of steps::

    service name resolved -> existence checked -> instantiated
        -> method resolved -> method checked -> arguments bound -> done

Two escalations jump straight to the fail service (``main``, no path
arguments): an unknown service, and an unknown method on a service that
has no ``fall`` method. Either way a :class:`DispatchFailure` with code 404
rides on the returned target. The fail service is terminal, so a request
instantiates at most two services.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wren.dispatch.binder import ArgumentBinder
from wren.dispatch.resolver import MethodResolver, MethodState
from wren.dispatch.types import DispatchFailure, ResolvedTarget, RouteRequest
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.routing.aliases import AliasTable
from wren.routing.names import to_service_name
from wren.services.base import FAIL_SERVICE_NAME, METHOD_MAIN, SERVICE_MAIN

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wren.routing.aliases import BindHook
    from wren.services.base import Service
    from wren.services.registry import ServiceRegistry

logger = logging.getLogger("wren.dispatch")

NOT_FOUND = 404


class DispatchCoordinator:
    """Resolve requests against a frozen registry and alias table.

    Holds no per-request state; one instance serves every request.

    Usage::

        coordinator = DispatchCoordinator(registry, AliasTable.from_mapping(routes))
        target = coordinator.resolve(RouteRequest.from_path("GET", "/user/show/42"))
        result = await target.service.serve()
    """

    __slots__ = ("_aliases", "_binder", "_registry", "_resolver")

    def __init__(
        self,
        registry: ServiceRegistry,
        aliases: AliasTable | None = None,
        *,
        binder: ArgumentBinder | None = None,
        resolver: MethodResolver | None = None,
    ) -> None:
        if not registry.exists(FAIL_SERVICE_NAME):
            msg = f"{FAIL_SERVICE_NAME} must be registered before dispatching."
            raise ConfigurationError(msg)
        self._registry = registry
        self._aliases = aliases or AliasTable()
        self._binder = binder or ArgumentBinder()
        self._resolver = resolver or MethodResolver()

    @property
    def aliases(self) -> AliasTable:
        return self._aliases

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    def resolve(self, route: RouteRequest, request: Request | None = None) -> ResolvedTarget:
        """Resolve *route* to a service instance, method, and arguments.

        *request* is handed to the service constructor; a bare one is
        built from *route* when omitted.

        Raises:
            ConfigurationError: From the regex route scan.
        """
        if request is None:
            request = Request(method=route.method, path=route.path)

        segment = route.segment(0).lower()
        supplied_method: str | None = None
        supplied_args: tuple[Any, ...] | None = None
        method_map: Mapping[str, str] | None = None
        hook: BindHook | None = None

        if not segment:
            raw_name = SERVICE_MAIN
        elif (alias := self._aliases.resolve_alias(segment)) is not None:
            logger.debug("Alias %r -> %r", segment, alias.target)
            raw_name = alias.target
            supplied_method = alias.method
            method_map = alias.methods
            hook = alias.hook
        elif self._aliases.has_regex_routes and (
            match := self._aliases.resolve_regex(route.path)
        ) is not None:
            logger.debug("Regex route %r -> %r::%s()", route.path, match.target, match.method)
            raw_name = match.target
            supplied_method = match.method
            supplied_args = match.arguments
            hook = match.hook
        else:
            raw_name = segment

        name = to_service_name(raw_name)

        if not self._registry.exists(name):
            return self._fail(request, DispatchFailure(NOT_FOUND, f"Service not found [{name}]"))

        service = self._registry.create(name, request, method=supplied_method)

        if service.is_fail_service:
            return self._terminal(service, name, failure=None)

        resolution = self._resolver.resolve(
            service, route, supplied=supplied_method, method_map=method_map
        )
        if resolution.state is MethodState.FAILED:
            text = f"Service method not found [{name}::{resolution.requested}()]"
            return self._fail(request, DispatchFailure(NOT_FOUND, text))

        method = resolution.method or METHOD_MAIN
        if resolution.state is MethodState.FALLBACK:
            logger.debug("%s::%s() missing, using %s()", name, resolution.requested, method)
        service.method = method

        offset = 2 if service.is_site else 1
        arguments = self._binder.bind(
            self._registry.get(name),
            method,
            route.segment_arguments(offset),
            supplied=supplied_args,
        )
        arguments = self._binder.apply_hook(hook, service, method, arguments)
        service.arguments = arguments

        return ResolvedTarget(service=service, name=name, method=method, arguments=arguments)

    def _fail(self, request: Request, failure: DispatchFailure) -> ResolvedTarget:
        logger.debug("%d %s %s: %s", failure.code, request.method, request.path, failure.text)
        service = self._registry.create(
            FAIL_SERVICE_NAME, request, method=METHOD_MAIN, failure=failure
        )
        return self._terminal(service, FAIL_SERVICE_NAME, failure=failure)

    def _terminal(
        self,
        service: Service,
        name: str,
        *,
        failure: DispatchFailure | None,
    ) -> ResolvedTarget:
        """Bind the fail service's ``main`` from defaults only."""
        service.method = METHOD_MAIN
        arguments = self._binder.bind(self._registry.get(name), METHOD_MAIN, ())
        service.arguments = arguments
        return ResolvedTarget(
            service=service,
            name=name,
            method=METHOD_MAIN,
            arguments=arguments,
            failure=failure,
        )
