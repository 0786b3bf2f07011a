"""Alias table and ordered regex routes.

Compiled once from the ``routes`` mapping in :class:`~wren.config.AppConfig`
when the app freezes, then read-only for the process lifetime.

Configuration shape::

    {
        # alias: public key -> service (and optionally method, method map, hook)
        "profile": {
            0: "user-profile",
            "method": "doShow",                 # optional fixed method
            "methods": {"name": "edit-name"},   # optional method map
            "methodFilter": callable,           # optional post-bind hook
        },
        # regex routes, evaluated in order against the full path
        "~~": [
            {0: "post", "pattern": r"^/p/(\\d+)$", "method": "doShow"},
        ],
    }
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from wren.errors import ConfigurationError

# Reserved key holding the regex route list
REGEX_ROUTES_KEY = "~~"

# Post-bind hook: hook(service, method, arguments) -> new arguments or None
BindHook = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class AliasEntry:
    """A public route key mapped to a service.

    Attributes:
        target: Raw service name (transformed like a path segment).
        method: Fixed canonical method name, used verbatim when set.
        methods: Method map for site services, public key -> raw method name.
        hook: Post-bind hook applied after argument binding.
    """

    target: str
    method: str | None = None
    methods: Mapping[str, str] = field(default_factory=dict)
    hook: BindHook | None = None


@dataclass(frozen=True, slots=True)
class RegexRoute:
    """One entry of the ordered regex route list.

    ``pattern`` and ``method`` are mandatory. They are checked when the
    route is evaluated, so a broken entry behind a matching one is never
    reported.
    """

    pattern: re.Pattern[str] | None
    target: str
    method: str
    hook: BindHook | None = None


@dataclass(frozen=True, slots=True)
class RegexMatch:
    """Result of a successful regex route scan."""

    target: str
    method: str
    arguments: tuple[str | None, ...]
    hook: BindHook | None = None


class AliasTable:
    """Alias lookup plus the ordered regex route list.

    Usage::

        table = AliasTable.from_mapping(config.routes)
        entry = table.resolve_alias("profile")
        match = table.resolve_regex("/p/42")
    """

    __slots__ = ("_aliases", "_regex_routes")

    def __init__(
        self,
        aliases: Mapping[str, AliasEntry] | None = None,
        regex_routes: Sequence[RegexRoute] = (),
    ) -> None:
        self._aliases: dict[str, AliasEntry] = {
            key.lower(): entry for key, entry in (aliases or {}).items()
        }
        self._regex_routes: tuple[RegexRoute, ...] = tuple(regex_routes)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> AliasTable:
        """Compile the external route configuration shape.

        Alias entries without a target are treated as absent. Regex route
        entries are kept even when incomplete; the error surfaces when the
        scan reaches them.
        """
        aliases: dict[str, AliasEntry] = {}
        regex_routes: list[RegexRoute] = []

        for key, raw in (mapping or {}).items():
            if key == REGEX_ROUTES_KEY:
                if not isinstance(raw, Sequence) or isinstance(raw, str):
                    msg = f"Regex routes under {REGEX_ROUTES_KEY!r} must be a list of mappings."
                    raise ConfigurationError(msg)
                regex_routes.extend(_compile_regex_route(item) for item in raw)
                continue

            if not isinstance(raw, Mapping):
                msg = f"Alias {key!r} must be a mapping, got {type(raw).__name__}."
                raise ConfigurationError(msg)
            target = _target_of(raw)
            if not target:
                continue
            methods = raw.get("methods") or {}
            if not isinstance(methods, Mapping):
                msg = f"Alias {key!r}: 'methods' must be a mapping."
                raise ConfigurationError(msg)
            aliases[key] = AliasEntry(
                target=target,
                method=raw.get("method") or None,
                methods={str(k).lower(): str(v) for k, v in methods.items()},
                hook=raw.get("methodFilter"),
            )

        return cls(aliases, regex_routes)

    @property
    def aliases(self) -> Mapping[str, AliasEntry]:
        return dict(self._aliases)

    @property
    def regex_routes(self) -> tuple[RegexRoute, ...]:
        return self._regex_routes

    @property
    def has_regex_routes(self) -> bool:
        return bool(self._regex_routes)

    def resolve_alias(self, segment: str) -> AliasEntry | None:
        """Exact, case-insensitive alias lookup."""
        return self._aliases.get(segment.lower())

    def resolve_regex(self, path: str) -> RegexMatch | None:
        """Scan regex routes in order; the first match wins.

        Arguments are the capture groups in order (group 1 first).

        Raises:
            ConfigurationError: If an evaluated route lacks pattern or method.
        """
        for route in self._regex_routes:
            if route.pattern is None or not route.method:
                msg = "Both pattern and method are required for regex routes."
                raise ConfigurationError(msg)
            match = route.pattern.search(path)
            if match is not None:
                return RegexMatch(
                    target=route.target,
                    method=route.method,
                    arguments=match.groups(),
                    hook=route.hook,
                )
        return None


def _target_of(raw: Mapping[Any, Any]) -> str:
    target = raw.get(0, raw.get("target", ""))
    return str(target) if target else ""


def _compile_regex_route(raw: Any) -> RegexRoute:
    if not isinstance(raw, Mapping):
        msg = f"Regex route must be a mapping, got {type(raw).__name__}."
        raise ConfigurationError(msg)

    pattern = raw.get("pattern")
    compiled: re.Pattern[str] | None = None
    if pattern:
        try:
            compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        except re.error as exc:
            msg = f"Invalid regex route pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc

    return RegexRoute(
        pattern=compiled,
        target=_target_of(raw),
        method=str(raw.get("method") or ""),
        hook=raw.get("methodFilter"),
    )
