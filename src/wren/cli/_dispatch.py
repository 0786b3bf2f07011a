"""``wren resolve`` — show the dispatch outcome for a path.

Resolution instantiates the target service (its ``init()`` runs) but
never calls the resolved method.
"""

import argparse
import sys

from wren.cli._resolve import resolve_app_or_exit
from wren.errors import ConfigurationError


def run_resolve(args: argparse.Namespace) -> None:
    """Print service, method, arguments, and status for ``args.path``."""
    app = resolve_app_or_exit(args)

    try:
        target = app.resolve(args.method, args.path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"service:   {target.name}")
    print(f"method:    {target.method}")
    print(f"arguments: {target.arguments!r}")
    print(f"status:    {target.status}")
    if target.failure is not None:
        print(f"failure:   {target.failure.text}")
