"""Wren CLI — dev server and dispatch introspection.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren — a service-dispatch web framework.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren run ---------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the dev server")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    # -- wren routes ------------------------------------------------------
    routes_parser = subparsers.add_parser(
        "routes", help="List services, aliases, and regex routes"
    )
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    # -- wren resolve -----------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve", help="Show which service and method a path dispatches to"
    )
    resolve_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    resolve_parser.add_argument("path", help="Request path (e.g. /user/edit-name/42)")
    resolve_parser.add_argument(
        "--method", default="GET", help="HTTP verb to resolve with (default: GET)"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from wren.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from wren.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from wren.cli._dispatch import run_resolve

        run_resolve(args)
