"""Serve a wren App with pounce.

pounce is an optional dependency (``pip install wren[server]``) and is
imported only when a server actually starts.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
    log_level: str = "info",
    app_path: str | None = None,
) -> None:
    """Run *app* under ``pounce.server.Server`` until interrupted.

    Args:
        app: The wren App (any ASGI callable works).
        host: Interface to bind.
        port: Port to bind.
        reload: Restart on file changes. Forces a single worker.
        workers: Worker processes when not reloading.
        log_level: pounce log level (debug, info, warning, error, critical).
        app_path: ``"module:attribute"`` of *app*. With reload on, pounce
            re-imports it so edited service files are picked up.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
        log_level=log_level,
    )
    Server(config, app, app_path=app_path).run()
