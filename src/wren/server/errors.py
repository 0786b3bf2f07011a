"""Error boundary of the request pipeline.

Services raise :class:`~wren.errors.HTTPError` to answer with a status;
anything else becomes a logged 500. Handlers registered with
``@app.error(...)`` are looked up by exception type, then by status.

Routing misses never get here: the fail service answers them.
"""

import inspect
import logging
import traceback
from typing import Any

from wren._internal.invoke import invoke
from wren._internal.types import ErrorHandler
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.negotiation import negotiate

logger = logging.getLogger("wren.server")

ErrorHandlers = dict[int | type, ErrorHandler]

_PLAIN_TEXT = "text/plain; charset=utf-8"


async def call_error_handler(handler: ErrorHandler, request: Request, exc: Exception) -> Response:
    """Call *handler* with as many of ``(request, exc)`` as it declares."""
    arity = len(inspect.signature(handler).parameters)
    args: tuple[Any, ...] = (request, exc)[: min(arity, 2)]
    return negotiate(await invoke(handler, *args))


async def _handled(
    handler: ErrorHandler | None,
    request: Request,
    exc: Exception,
    status: int,
) -> Response | None:
    if handler is None:
        return None
    response = await call_error_handler(handler, request, exc)
    # A plain return value keeps the error status
    return response.with_status(status) if response.status == 200 else response


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Response for an ``HTTPError`` raised while serving."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    response = await _handled(handler, request, exc, exc.status)
    if response is not None:
        return response

    if debug and exc.detail:
        body = f"{exc.status}: {exc.detail}"
    else:
        body = exc.detail or f"Error {exc.status}"
    return Response(body=body, status=exc.status, content_type=_PLAIN_TEXT, headers=exc.headers)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """500 for anything a service (or its constructor) let escape."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(500) or error_handlers.get(type(exc))
    response = await _handled(handler, request, exc, 500)
    if response is not None:
        return response

    body = "".join(traceback.format_exception(exc)) if debug else "Internal Server Error"
    return Response(body=body, status=500, content_type=_PLAIN_TEXT)
