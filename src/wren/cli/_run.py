"""``wren run`` — development server command."""

import argparse

from wren.cli._resolve import resolve_app_or_exit


def run_server(args: argparse.Namespace) -> None:
    """Start the dev server for ``args.app``.

    ``--host`` and ``--port`` override the app's config. The import string
    is forwarded so reload re-imports the app, picking up service changes.
    """
    app = resolve_app_or_exit(args)

    from wren.server.dev import run_dev_server

    run_dev_server(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=app.config.debug,
        workers=app.config.workers,
        log_level=app.config.log_level,
        app_path=args.app,
    )
