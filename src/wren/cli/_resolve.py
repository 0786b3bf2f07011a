"""App import resolution — resolves ``"module:attribute"`` strings to App instances.

Shared by every ``wren`` subcommand that takes an ``APP`` argument.
"""

import argparse
import importlib
import sys

from wren.app import App


def resolve_app(import_string: str) -> App:
    """Resolve an import string to a wren App instance.

    Accepts ``"module:attribute"``; the attribute defaults to ``"app"``.
    A callable that is not an App is treated as a factory and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a wren ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wren.App instance"
        raise TypeError(msg)

    return obj


def resolve_app_or_exit(args: argparse.Namespace) -> App:
    """``resolve_app(args.app)``, printing the error and exiting 1 on failure."""
    try:
        return resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
