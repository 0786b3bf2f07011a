"""Service registry — canonical name to service class, with method tables.

Each registered service gets a :class:`ServiceDescriptor` built once, at
registration time. The descriptor records every public method with its
positional parameters and defaults, so argument binding never inspects
signatures while a request is being resolved.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from wren.errors import ConfigurationError, ServiceError
from wren.services.base import METHOD_FALL, Service

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """A declared positional parameter of a service method."""

    name: str
    position: int
    has_default: bool = False
    default: Any = None


@dataclass(frozen=True, slots=True)
class MethodSpec:
    """Positional parameters of one service method.

    ``variadic`` is True when the method accepts ``*args``; extra path
    segments are then passed through instead of dropped.
    """

    name: str
    params: tuple[ParamSpec, ...] = ()
    variadic: bool = False


@dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """Everything the dispatcher needs to know about a service class.

    Attributes:
        name: Canonical service name (``UserProfileService``).
        factory: The service class, called with the request to instantiate.
        source: File that defines the class, when known.
        protocol: ``"site"``, ``"rest"``, or None for bare services.
        main_only: The class sets ``use_main_only``.
        methods: Public methods keyed by name.
    """

    name: str
    factory: type[Service]
    source: str | None = None
    protocol: str | None = None
    main_only: bool = False
    methods: Mapping[str, MethodSpec] = field(default_factory=dict)

    @classmethod
    def from_class(
        cls,
        service_cls: type[Service],
        *,
        name: str | None = None,
        source: str | None = None,
    ) -> ServiceDescriptor:
        """Build a descriptor from a service class.

        Raises:
            ServiceError: If *service_cls* is not a Service subclass.
        """
        if not isinstance(service_cls, type) or not issubclass(service_cls, Service):
            msg = f"{service_cls!r} is not a wren Service subclass."
            raise ServiceError(msg)

        if source is None:
            try:
                source = inspect.getsourcefile(service_cls)
            except TypeError:
                source = None

        return cls(
            name=name or service_cls.__name__,
            factory=service_cls,
            source=source,
            protocol=service_cls.protocol,
            main_only=bool(service_cls.use_main_only),
            methods=_collect_methods(service_cls),
        )

    def method(self, name: str) -> MethodSpec | None:
        return self.methods.get(name)


def _collect_methods(service_cls: type[Service]) -> dict[str, MethodSpec]:
    """Build the method table for *service_cls*.

    Skips private names and methods inherited unchanged from ``Service``.
    """
    methods: dict[str, MethodSpec] = {}
    for name in dir(service_cls):
        if name.startswith("_"):
            continue
        attr = getattr(service_cls, name)
        if not callable(attr) or isinstance(attr, type):
            continue
        if getattr(Service, name, None) is attr:
            continue

        raw = inspect.getattr_static(service_cls, name)
        try:
            sig = inspect.signature(attr)
        except (TypeError, ValueError):
            continue

        params = list(sig.parameters.values())
        # Plain functions still carry ``self``
        if inspect.isfunction(raw) and params:
            params = params[1:]

        specs: list[ParamSpec] = []
        variadic = False
        for param in params:
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                variadic = True
                break
            if param.kind not in _POSITIONAL:
                break
            has_default = param.default is not inspect.Parameter.empty
            specs.append(
                ParamSpec(
                    name=param.name,
                    position=len(specs),
                    has_default=has_default,
                    default=param.default if has_default else None,
                )
            )

        methods[name] = MethodSpec(name=name, params=tuple(specs), variadic=variadic)
    return methods


class ServiceRegistry:
    """Canonical service name -> descriptor, filled at startup.

    Usage::

        registry = ServiceRegistry()
        registry.register(UserService)
        registry.exists("UserService")  # True
        service = registry.create("UserService", request)
    """

    __slots__ = ("_descriptors", "_frozen")

    def __init__(self) -> None:
        self._descriptors: dict[str, ServiceDescriptor] = {}
        self._frozen = False

    def register(
        self,
        service_cls: type[Service],
        *,
        name: str | None = None,
        source: str | None = None,
    ) -> ServiceDescriptor:
        """Register a service class under its canonical name.

        Registering the same class twice is a no-op.

        Raises:
            ConfigurationError: If the registry is frozen or the name is
                already taken by another class.
            ServiceError: If *service_cls* is not a Service subclass.
        """
        if self._frozen:
            msg = "Cannot register services after the registry is frozen."
            raise ConfigurationError(msg)

        descriptor = ServiceDescriptor.from_class(service_cls, name=name, source=source)
        existing = self._descriptors.get(descriptor.name)
        if existing is not None:
            if existing.factory is service_cls:
                return existing
            msg = (
                f"Service name {descriptor.name!r} is already registered "
                f"to {existing.factory.__module__}.{existing.factory.__qualname__}."
            )
            raise ConfigurationError(msg)

        self._descriptors[descriptor.name] = descriptor
        return descriptor

    def add(self, descriptor: ServiceDescriptor) -> None:
        """Register a descriptor built elsewhere (filesystem discovery)."""
        if self._frozen:
            msg = "Cannot register services after the registry is frozen."
            raise ConfigurationError(msg)
        self._descriptors.setdefault(descriptor.name, descriptor)

    def freeze(self) -> None:
        self._frozen = True

    def exists(self, name: str) -> bool:
        """True if a service class is registered under *name*."""
        return name in self._descriptors

    def get(self, name: str) -> ServiceDescriptor:
        """Return the descriptor for *name*. Raises ``KeyError`` if absent."""
        return self._descriptors[name]

    def create(self, name: str, request: Any, **kwargs: Any) -> Service:
        """Instantiate the service registered under *name*.

        Constructor exceptions propagate unchanged.
        """
        descriptor = self._descriptors[name]
        return descriptor.factory(request, name=name, **kwargs)

    @staticmethod
    def method_exists(service: Service | None, method: str | None) -> bool:
        """True if *service* exposes a public callable named *method*."""
        if service is None or not method or method.startswith("_"):
            return False
        return callable(getattr(service, method, None))

    @staticmethod
    def fallback_method_exists(service: Service | None) -> bool:
        """True if *service* declares the reserved fallback method."""
        return ServiceRegistry.method_exists(service, METHOD_FALL)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)
