"""Positional argument binding.

Path segments after the service (and, for site services, the method)
segment are bound to the method's declared positional parameters in
order. Missing values take the parameter default, or None when there is
no default. Binding never fails.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.routing.aliases import BindHook
    from wren.services.base import Service
    from wren.services.registry import MethodSpec, ServiceDescriptor


class ArgumentBinder:
    """Bind raw values to a method's parameter table.

    Args:
        regex_use_defaults: When True, parameters not covered by regex
            captures are filled with their defaults. By default regex
            captures are used verbatim.
    """

    __slots__ = ("regex_use_defaults",)

    def __init__(self, *, regex_use_defaults: bool = False) -> None:
        self.regex_use_defaults = regex_use_defaults

    def bind(
        self,
        descriptor: ServiceDescriptor,
        method: str,
        raw_segments: Sequence[str],
        *,
        supplied: Sequence[Any] | None = None,
    ) -> tuple[Any, ...]:
        """Return the argument tuple for ``descriptor.factory.<method>``.

        *supplied* (regex captures) bypasses *raw_segments* entirely.
        """
        spec = descriptor.method(method)

        if supplied is not None:
            captured = tuple(supplied)
            if self.regex_use_defaults and spec is not None:
                captured = (*captured, *_defaults_from(spec, len(captured)))
            return captured

        if spec is None:
            return tuple(raw_segments)

        arguments: list[Any] = []
        for param in spec.params:
            if param.position < len(raw_segments):
                arguments.append(raw_segments[param.position])
            elif param.has_default:
                arguments.append(param.default)
            else:
                arguments.append(None)

        if spec.variadic:
            arguments.extend(raw_segments[len(spec.params) :])

        return tuple(arguments)

    @staticmethod
    def apply_hook(
        hook: BindHook | None,
        service: Service,
        method: str,
        arguments: tuple[Any, ...],
    ) -> tuple[Any, ...]:
        """Run a post-bind hook with the service as context.

        A hook returning None leaves the arguments unchanged; anything else
        replaces them.
        """
        if hook is None:
            return arguments
        result = hook(service, method, arguments)
        if result is None:
            return arguments
        return tuple(result)


def _defaults_from(spec: MethodSpec, start: int) -> list[Any]:
    return [p.default if p.has_default else None for p in spec.params[start:]]
