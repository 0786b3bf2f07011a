"""The wren App: service registration, lifecycle hooks, and the ASGI entry.

Services, error handlers and hooks are collected first. The app then
compiles them once into a registry and a dispatch coordinator, and serves
from that frozen state.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import ErrorHandler
from wren.config import AppConfig
from wren.dispatch.binder import ArgumentBinder
from wren.dispatch.coordinator import DispatchCoordinator
from wren.dispatch.types import ResolvedTarget, RouteRequest
from wren.routing.aliases import AliasTable
from wren.server.handler import handle_request
from wren.services.base import Service
from wren.services.defaults import register_defaults
from wren.services.discovery import discover_services
from wren.services.registry import ServiceRegistry

logger = logging.getLogger("wren.app")

S = TypeVar("S", bound=type[Service])


class App:
    """The wren application.

    Registration calls are only valid before the first request (or lifespan
    startup, or ``run()``); after that the app is frozen.

    Freezing discovers services under ``config.services_dir``, registers
    the built-in main and fail services where the application has none,
    and compiles ``config.routes`` into the alias table.

    Thread safety:
        Registration happens at import time on one thread. Freezing takes
        a lock and re-checks the flag, so concurrent first requests compile
        the app once.
    """

    __slots__ = (
        "_coordinator",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_pending_services",
        "_registry",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_services: list[tuple[type[Service], str | None]] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._registry: ServiceRegistry | None = None
        self._coordinator: DispatchCoordinator | None = None

    # -- Service registration --

    def service(self, cls: S) -> S:
        """Register a service class via decorator.

        Explicitly registered services take precedence over services
        discovered under ``config.services_dir``::

            @app.service
            class UserProfileService(SiteService):
                def doEditName(self, user_id, field="name"): ...
        """
        self.register_service(cls)
        return cls

    def register_service(self, cls: type[Service], *, name: str | None = None) -> None:
        """Register a service class, optionally under a different name."""
        self._check_not_frozen()
        self._pending_services.append((cls, name))

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        Routing misses are answered by the fail service, not by these;
        error handlers see ``HTTPError`` raised by services and unexpected
        exceptions (500).
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a startup hook (sync or async), run in order at lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a shutdown hook (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def registry(self) -> ServiceRegistry:
        """The frozen service registry (freezes the app if needed)."""
        self._ensure_frozen()
        assert self._registry is not None
        return self._registry

    @property
    def coordinator(self) -> DispatchCoordinator:
        """The dispatch coordinator (freezes the app if needed)."""
        self._ensure_frozen()
        assert self._coordinator is not None
        return self._coordinator

    def resolve(self, method: str, path: str) -> ResolvedTarget:
        """Resolve a request without serving it.

        Useful for tooling and tests::

            target = app.resolve("GET", "/user-profile/edit-name/42")
            target.name, target.method, target.arguments
        """
        return self.coordinator.resolve(RouteRequest.from_path(method, path))

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the server.

        Compiles the app (discovering services, compiling routes) and
        serves requests through pounce. ``config.debug`` enables reload.
        """
        self._ensure_frozen()

        from wren.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            workers=self.config.workers,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3 entry point: lifespan here, http through ``handle_request``."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        assert self._coordinator is not None

        await handle_request(
            scope,
            receive,
            send,
            coordinator=self._coordinator,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Answer the ASGI lifespan messages.

        Services are discovered and routes compiled before the startup
        hooks run, so configuration errors stop the server before it
        accepts a request.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self._run_hooks(self._startup_hooks)
                    except Exception as exc:
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self._run_hooks(self._shutdown_hooks)
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    async def _run_hooks(self, hooks: list[Callable[..., Any]]) -> None:
        for hook in hooks:
            await invoke(hook)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Explicit registrations first, they win over discovery
        registry = ServiceRegistry()
        for cls, name in self._pending_services:
            registry.register(cls, name=name)

        # 2. Filesystem services (<services_dir>/<Name>/<Name>.py)
        if self.config.services_dir is not None:
            for descriptor in discover_services(self.config.services_dir):
                if not registry.exists(descriptor.name):
                    registry.add(descriptor)

        # 3. Built-in MainService / FailService
        register_defaults(registry)
        registry.freeze()
        self._registry = registry

        # 4. Alias table and dispatcher
        aliases = AliasTable.from_mapping(self.config.routes)
        self._coordinator = DispatchCoordinator(
            registry,
            aliases,
            binder=ArgumentBinder(regex_use_defaults=self.config.regex_arguments_use_defaults),
        )

        self._frozen = True
        logger.debug(
            "App frozen: %d service(s), %d alias(es), %d regex route(s)",
            len(registry),
            len(aliases.aliases),
            len(aliases.regex_routes),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register services, error handlers, and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
